"""Melon 차트/곡/앨범 조회 결과에 사용되는 데이터 모델 정의."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from .errors import MelonError

T = TypeVar('T')


class RankDirection(str, Enum):
    """차트 순위 변동 방향."""
    UP = "up"
    DOWN = "down"
    STATIC = "static"
    ABSENT = "absent"


@dataclass(frozen=True)
class RankChange:
    """순위 변동 정보 (static/absent 는 value=0)."""
    direction: RankDirection = RankDirection.ABSENT
    value: int = 0

    @classmethod
    def up(cls, value: int) -> "RankChange":
        return cls(RankDirection.UP, max(value, 0))

    @classmethod
    def down(cls, value: int) -> "RankChange":
        return cls(RankDirection.DOWN, max(value, 0))

    @classmethod
    def static(cls) -> "RankChange":
        return cls(RankDirection.STATIC, 0)

    @classmethod
    def absent(cls) -> "RankChange":
        return cls(RankDirection.ABSENT, 0)

    def to_dict(self) -> dict:
        return {"direction": self.direction.value, "value": self.value}


@dataclass
class Track:
    """차트의 한 줄(곡) 정보."""
    rank: str
    song_id: Optional[str]  # None 이면 재생 링크가 없는 곡
    title: str
    artists: List[str] = field(default_factory=list)
    album: str = ""
    album_id: Optional[str] = None
    image_url: str = ""
    rank_change: RankChange = field(default_factory=RankChange.absent)

    def to_dict(self) -> dict:
        return {
            "rank": self.rank,
            "songId": self.song_id,
            "title": self.title,
            "artists": list(self.artists),
            "album": self.album,
            "albumId": self.album_id,
            "imageUrl": self.image_url,
            "rankChange": self.rank_change.to_dict(),
        }


@dataclass
class ArtistRef:
    """아티스트 이름과 ID (ID를 찾지 못하면 빈 문자열)."""
    name: str
    id: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id}


@dataclass
class AlbumRef:
    """곡이 수록된 앨범 참조."""
    name: str = ""
    id: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id}


@dataclass
class Producer:
    """곡 참여자 (작사/작곡/편곡 등 역할을 누적)."""
    name: str
    id: str = ""
    roles: List[str] = field(default_factory=list)

    def add_role(self, role: str) -> None:
        if role and role not in self.roles:
            self.roles.append(role)

    def to_dict(self) -> dict:
        return {"name": self.name, "id": self.id, "roles": list(self.roles)}


@dataclass
class SongData:
    """곡 상세 정보."""
    song_id: str
    title: str
    artists: List[ArtistRef] = field(default_factory=list)
    album: AlbumRef = field(default_factory=AlbumRef)
    release_date: str = ""
    genre: str = ""
    lyrics: str = ""
    producers: List[Producer] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "songId": self.song_id,
            "title": self.title,
            "artists": [a.to_dict() for a in self.artists],
            "album": self.album.to_dict(),
            "releaseDate": self.release_date,
            "genre": self.genre,
            "lyrics": self.lyrics,
            "producers": [p.to_dict() for p in self.producers],
        }


@dataclass
class AlbumSong:
    """앨범 수록곡 정보."""
    song_id: str
    title: str
    artists: List[ArtistRef] = field(default_factory=list)
    is_title: bool = False

    def to_dict(self) -> dict:
        return {
            "songId": self.song_id,
            "title": self.title,
            "artists": [a.to_dict() for a in self.artists],
            "isTitle": self.is_title,
        }


@dataclass
class AlbumData:
    """앨범 상세 정보."""
    album_id: str
    type: str = ""
    title: str = ""
    artists: List[ArtistRef] = field(default_factory=list)
    release_date: str = ""
    genre: str = ""
    publisher: str = ""
    agency: str = ""
    image_url: str = ""
    introduction: str = ""
    songs: List[AlbumSong] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "albumId": self.album_id,
            "type": self.type,
            "title": self.title,
            "artists": [a.to_dict() for a in self.artists],
            "releaseDate": self.release_date,
            "genre": self.genre,
            "publisher": self.publisher,
            "agency": self.agency,
            "imageUrl": self.image_url,
            "introduction": self.introduction,
            "songs": [s.to_dict() for s in self.songs],
        }


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    성공 값 또는 MelonError 를 담는 결과 객체.

    라우팅 계층과의 경계에서 예외 대신 사용한다.
    """
    value: Optional[T] = None
    error: Optional[MelonError] = None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def err(cls, error: MelonError) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_err(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T:
        """성공 값을 반환하고, 오류라면 그 오류를 발생시킨다."""
        if self.error is not None:
            raise self.error
        return self.value

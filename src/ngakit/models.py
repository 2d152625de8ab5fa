"""Configuration models and closed input enums shared across ngakit.

The models fall into two groups:

**Configuration models** -- :class:`Credential`, :class:`RequestConfig`,
    :class:`CacheConfig` and :class:`ClientConfig` are handed to
    :class:`~ngakit.client.NGAClient` once and never change afterwards.
    :class:`AuthConfig`, :class:`OutputConfig` and :class:`GlobalConfig`
    are the CLI's on-disk JSON shape.

**Input enums and identifiers** -- the closed sets builders accept
    (:class:`TopicOrder`, :class:`SearchTimeRange`, :class:`NotificationType`,
    :class:`Vote`, :class:`FavoriteOp`, :class:`SubforumFilterOp`,
    :class:`Device`) and the :class:`ForumId` value object.

Decoded forum data lives in :mod:`ngakit.records`.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, SecretStr, field_validator


DEFAULT_BASE_URL = "https://nga.178.com/"


# --- Input enums ---


class Device(str, enum.Enum):
    """Client identity announced through the ``User-Agent`` header."""

    APPLE = "apple"
    ANDROID = "android"
    DESKTOP = "desktop"
    WINDOWS_PHONE = "windows_phone"

    @property
    def user_agent(self) -> str:
        return _USER_AGENTS[self]


_USER_AGENTS = {
    Device.APPLE: "NGA_skull/7.3.1(iPhone17,1;iOS 26.0)",
    Device.ANDROID: "Nga_Official/80024(Android12)",
    Device.DESKTOP: (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/101.0.4951.64 Safari/537.36"
    ),
    Device.WINDOWS_PHONE: "NGA_WP_JW/(;WINDOWS)",
}


class TopicOrder(str, enum.Enum):
    """Orderings accepted by the topic list. Values are the wire ``order_by``."""

    LAST_POST = "lastpost"
    POST_DATE = "postdate"
    RECOMMEND = "recommend"

    @property
    def wire_value(self) -> str:
        # The forum's default ordering is expressed by omitting order_by.
        return "" if self is TopicOrder.LAST_POST else self.value


class SearchTimeRange(str, enum.Enum):
    """How far back a topic search looks."""

    ALL = "all"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def seconds(self) -> Optional[int]:
        return _TIME_RANGE_SECONDS[self]


_TIME_RANGE_SECONDS = {
    SearchTimeRange.ALL: None,
    SearchTimeRange.DAY: 86400,
    SearchTimeRange.WEEK: 604800,
    SearchTimeRange.MONTH: 2592000,
    SearchTimeRange.YEAR: 31536000,
}


class NotificationType(str, enum.Enum):
    """Notification categories understood by the ``noti`` library."""

    REPLY = "reply"
    QUOTE = "quote"
    AT = "at"
    COMMENT = "comment"
    SYSTEM = "system"
    PUNISHMENT = "punishment"
    MESSAGE = "message"


class Vote(str, enum.Enum):
    """Direction of a post vote. Values are the wire ``value`` field."""

    UP = "1"
    DOWN = "0"


class FavoriteOp(str, enum.Enum):
    """Add to or remove from a favorites list."""

    ADD = "add"
    REMOVE = "del"


class SubforumFilterOp(str, enum.Enum):
    """Show or hide a subforum in its parent's listing.

    Values name the block-list action, so showing a subforum removes it
    from the block list.
    """

    SHOW = "del"
    HIDE = "add"


class ForumIdKind(str, enum.Enum):
    """NGA addresses forums either by ``fid`` or by set-topic id ``stid``."""

    FID = "fid"
    STID = "stid"


class ForumId(BaseModel):
    """A forum identifier together with the parameter it travels as.

    Example::

        ForumId.parse("-7")          # fid -7
        ForumId.parse("stid:123")    # collection topic 123
    """

    model_config = ConfigDict(frozen=True)

    kind: ForumIdKind = ForumIdKind.FID
    value: str

    @field_validator("value")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("forum id must not be empty")
        return value

    @classmethod
    def fid(cls, value: str | int) -> ForumId:
        return cls(kind=ForumIdKind.FID, value=str(value))

    @classmethod
    def stid(cls, value: str | int) -> ForumId:
        return cls(kind=ForumIdKind.STID, value=str(value))

    @classmethod
    def parse(cls, text: str) -> ForumId:
        """Parse ``"fid:N"``, ``"stid:N"`` or a bare fid."""
        prefix, sep, rest = text.partition(":")
        if sep and prefix in (ForumIdKind.FID.value, ForumIdKind.STID.value):
            return cls(kind=ForumIdKind(prefix), value=rest)
        return cls(kind=ForumIdKind.FID, value=text)

    @property
    def namespace(self) -> str:
        """Cache namespace of this forum's listings."""
        return f"forum:{self.kind.value}:{self.value}"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


# --- Client configuration ---


class Credential(BaseModel):
    """Access token and user id pair.

    The token is a :class:`~pydantic.SecretStr` so it never shows up in a
    ``repr``, a log line, or a ``model_dump`` rendered for output.
    """

    model_config = ConfigDict(frozen=True)

    token: SecretStr
    uid: PositiveInt

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("token must not be empty")
        return value

    def cookies(self) -> dict[str, str]:
        """Session cookies NGA reads the identity from."""
        return {
            "ngaPassportUid": str(self.uid),
            "ngaPassportCid": self.token.get_secret_value(),
        }


class RequestConfig(BaseModel):
    """Transport settings applied to every request."""

    model_config = ConfigDict(frozen=True)

    connect_timeout: float = Field(default=5.0, description="Connect timeout in seconds")
    read_timeout: float = Field(default=20.0, description="Read timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    device: Device = Field(default=Device.APPLE, description="Announced client device")
    user_agent: Optional[str] = Field(
        default=None, description="Custom User-Agent, overrides the device agent"
    )


class CacheConfig(BaseModel):
    """Cache preferences. TTLs are per volatility band, in seconds."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Enable response caching")
    backend: str = Field(default="disk", description="Cache backend for the CLI: disk, memory")
    ttl_static_seconds: int = Field(
        default=3600, ge=0, description="Categories, profiles and other slow-moving data"
    )
    ttl_standard_seconds: int = Field(
        default=300, ge=0, description="Topic pages, comments and user history"
    )
    ttl_recent_seconds: int = Field(
        default=30, ge=0, description="Listings, searches, notifications and messages"
    )


class ClientConfig(BaseModel):
    """Immutable configuration of one :class:`~ngakit.client.NGAClient`.

    Build a new client to change credentials; there is no setter.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    credential: Optional[Credential] = None
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("base_url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"


# --- CLI configuration file ---


class AuthConfig(BaseModel):
    """Credential pair as stored in the CLI configuration file."""

    token: str
    uid: int

    def to_credential(self) -> Credential:
        return Credential(token=SecretStr(self.token), uid=self.uid)


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/ngakit/config.json``.

    Loaded and saved by :func:`~ngakit.config.load_global_config` and
    :func:`~ngakit.config.save_global_config`. Environment variables
    override it; see :func:`~ngakit.config.resolve_client_config`.
    """

    base_url: str = DEFAULT_BASE_URL
    auth: Optional[AuthConfig] = None
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)

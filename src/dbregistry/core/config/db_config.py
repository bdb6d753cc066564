"""
Models for the persisted database config document.

Changes to these models must stay backwards compatible with documents users
already have on disk: field aliases are the on-disk (camelCase) names and
``DB_CONFIG_VERSION`` tags the shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DB_CONFIG_VERSION = 1


class _ConfigModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class SelectedDbItemKind(str, Enum):
    LOCAL_USER_DEFINED_LIST = "localUserDefinedList"
    LOCAL_DATABASE = "localDatabase"
    REMOTE_SYSTEM_DEFINED_LIST = "remoteSystemDefinedList"
    REMOTE_USER_DEFINED_LIST = "remoteUserDefinedList"
    REMOTE_OWNER = "remoteOwner"
    REMOTE_REPOSITORY = "remoteRepository"


class ExpandedDbItemKind(str, Enum):
    ROOT_LOCAL = "rootLocal"
    ROOT_REMOTE = "rootRemote"
    LOCAL_USER_DEFINED_LIST = "localUserDefinedList"
    REMOTE_USER_DEFINED_LIST = "remoteUserDefinedList"


class LocalDatabase(_ConfigModel):
    name: str
    date_added: int = Field(alias="dateAdded")
    language: str
    storage_path: str = Field(alias="storagePath")


class LocalList(_ConfigModel):
    name: str
    databases: List[LocalDatabase] = Field(default_factory=list)


class RemoteRepositoryList(_ConfigModel):
    name: str
    repositories: List[str] = Field(default_factory=list)


class RemoteDbConfig(_ConfigModel):
    repository_lists: List[RemoteRepositoryList] = Field(
        default_factory=list, alias="repositoryLists"
    )
    owners: List[str] = Field(default_factory=list)
    repositories: List[str] = Field(default_factory=list)


class LocalDbConfig(_ConfigModel):
    lists: List[LocalList] = Field(default_factory=list)
    databases: List[LocalDatabase] = Field(default_factory=list)


class DbConfigDatabases(_ConfigModel):
    remote: RemoteDbConfig = Field(default_factory=RemoteDbConfig)
    local: LocalDbConfig = Field(default_factory=LocalDbConfig)


# Selected items: one config-wide "current" item, addressed by name path.


class SelectedLocalUserDefinedList(_ConfigModel):
    kind: Literal["localUserDefinedList"] = "localUserDefinedList"
    list_name: str = Field(alias="listName")


class SelectedLocalDatabase(_ConfigModel):
    kind: Literal["localDatabase"] = "localDatabase"
    database_name: str = Field(alias="databaseName")
    list_name: Optional[str] = Field(default=None, alias="listName")


class SelectedRemoteSystemDefinedList(_ConfigModel):
    kind: Literal["remoteSystemDefinedList"] = "remoteSystemDefinedList"
    list_name: str = Field(alias="listName")


class SelectedRemoteUserDefinedList(_ConfigModel):
    kind: Literal["remoteUserDefinedList"] = "remoteUserDefinedList"
    list_name: str = Field(alias="listName")


class SelectedRemoteOwner(_ConfigModel):
    kind: Literal["remoteOwner"] = "remoteOwner"
    owner_name: str = Field(alias="ownerName")


class SelectedRemoteRepository(_ConfigModel):
    kind: Literal["remoteRepository"] = "remoteRepository"
    repository_name: str = Field(alias="repositoryName")
    list_name: Optional[str] = Field(default=None, alias="listName")


SelectedDbItem = Annotated[
    Union[
        SelectedLocalUserDefinedList,
        SelectedLocalDatabase,
        SelectedRemoteSystemDefinedList,
        SelectedRemoteUserDefinedList,
        SelectedRemoteOwner,
        SelectedRemoteRepository,
    ],
    Field(discriminator="kind"),
]


# Expanded items: container nodes whose expansion survives across sessions.


class RootLocalExpandedDbItem(_ConfigModel):
    kind: Literal["rootLocal"] = "rootLocal"


class RootRemoteExpandedDbItem(_ConfigModel):
    kind: Literal["rootRemote"] = "rootRemote"


class LocalUserDefinedListExpandedDbItem(_ConfigModel):
    kind: Literal["localUserDefinedList"] = "localUserDefinedList"
    list_name: str = Field(alias="listName")


class RemoteUserDefinedListExpandedDbItem(_ConfigModel):
    kind: Literal["remoteUserDefinedList"] = "remoteUserDefinedList"
    list_name: str = Field(alias="listName")


ExpandedDbItem = Annotated[
    Union[
        RootLocalExpandedDbItem,
        RootRemoteExpandedDbItem,
        LocalUserDefinedListExpandedDbItem,
        RemoteUserDefinedListExpandedDbItem,
    ],
    Field(discriminator="kind"),
]


class DbConfig(_ConfigModel):
    version: int = DB_CONFIG_VERSION
    databases: DbConfigDatabases = Field(default_factory=DbConfigDatabases)
    selected: Optional[SelectedDbItem] = None
    expanded: List[ExpandedDbItem] = Field(default_factory=list)

    @property
    def remote(self) -> RemoteDbConfig:
        return self.databases.remote

    @property
    def local(self) -> LocalDbConfig:
        return self.databases.local

    def to_dict(self) -> Dict[str, Any]:
        """Return the on-disk (JSON-ready, camelCase) representation."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "DbConfig":
        return cls.model_validate(payload)


def create_empty_db_config() -> DbConfig:
    """A fresh document: version tag, empty collections, nothing selected."""
    return DbConfig(version=DB_CONFIG_VERSION)


def clone_db_config(config: DbConfig) -> DbConfig:
    """Deep copy; no list or nested model is shared with ``config``."""
    return config.model_copy(deep=True)

"""Pydantic models describing the GitHub REST payloads the refresher reads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GitHubBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RepositoryPayload(GitHubBaseModel):
    full_name: str | None = None
    default_branch: str | None = None


class UserPayload(GitHubBaseModel):
    login: str | None = None


class GitActorPayload(GitHubBaseModel):
    name: str | None = None
    date: str | None = None


class CommitDetailPayload(GitHubBaseModel):
    author: GitActorPayload | None = None
    committer: GitActorPayload | None = None
    message: str = ""


class CommitPayload(GitHubBaseModel):
    sha: str = ""
    author: UserPayload | None = None
    commit: CommitDetailPayload | None = None

    @property
    def author_login(self) -> str | None:
        return self.author.login if self.author else None

    @property
    def date(self) -> str | None:
        if self.commit is None:
            return None
        for actor in (self.commit.committer, self.commit.author):
            if actor is not None and actor.date:
                return actor.date
        return None


class ReleasePayload(GitHubBaseModel):
    tag_name: str | None = None
    published_at: str | None = None
    created_at: str | None = None

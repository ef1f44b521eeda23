from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class ApiRules(BaseModel):
    title: str
    version: str
    cors_origins: list[str] = Field(default_factory=list)


class LoggingRules(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StorageRules(BaseModel):
    database_file: str
    migrations_dir: str


class Rules(BaseModel):
    project: ProjectRules
    api: ApiRules
    logging: LoggingRules = Field(default_factory=LoggingRules)
    storage: StorageRules

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import sys
import yaml, pathlib


def host_platform() -> str:
    # "android" and "ios" on mobile builds of CPython, "linux", "darwin", "win32" elsewhere.
    return sys.platform


class RunConfig(BaseModel):
    batch_name: str = Field("Automatic tests", description="Name reported in batch events")
    platform: str = Field(default_factory=host_platform, description="Host platform used to select tagged tests")
    only_suite: Optional[str] = Field(None, description="Run only the suite with this name")
    only_test: Optional[str] = Field(None, description="Skip every test except this one")
    interactive: bool = Field(False, description="Provide user interaction to interactive suites")
    print_info_messages: bool = Field(False, description="Hooks report when they are called")

    @field_validator("platform")
    @classmethod
    def _lower_platform(cls, v: str) -> str:
        return v.lower()


class LogConfig(BaseModel):
    level: str = Field("INFO")


class ReportConfig(BaseModel):
    junit: Optional[str] = Field(None, description="Write JUnit XML to this path")
    console: bool = Field(True)


class AppConfig(BaseModel):
    run: RunConfig = Field(default_factory=RunConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    suites: List[str] = Field(default_factory=list, description="Suite modules, e.g. selfcheck")


def load_config(path: Optional[str] = None) -> AppConfig:
    if path is None:
        return AppConfig()
    data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    return AppConfig.model_validate(data)

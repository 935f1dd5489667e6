"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of writing
``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias maps to one
``get_*`` factory and can be overridden in tests via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from creatorkit.configs.config import AppConfig, get_api_config, get_app_config
from creatorkit.configs.system import APIConfig
from creatorkit.core.service.deps import get_tool_service
from creatorkit.core.service.runner import ToolService

AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
APIConfigDep = Annotated[APIConfig, Depends(get_api_config)]
ToolServiceDep = Annotated[ToolService, Depends(get_tool_service)]

"""
Collaborator interfaces consumed by the forwarder, plus static implementations.

The host application supplies its own objects with these shapes; the static
classes back the CLI and the tests.
"""

from importlib import metadata
from typing import Any, Mapping, Optional, Protocol

from webscale_eventstream.errors import ScopeError


class ConfigReader(Protocol):
    def is_set_flag(self, path: str, scope: str) -> bool: ...


class StoreContext(Protocol):
    def get_base_url(self) -> str: ...

    def get_store_code(self) -> str: ...

    def get_website_code(self) -> str: ...


class RequestContext(Protocol):
    def get_header(self, name: str) -> Optional[str]: ...


class CookieReader(Protocol):
    def get_cookie(self, name: str) -> Optional[str]: ...


class ModuleRegistry(Protocol):
    def get_version(self, module_name: str) -> Optional[str]: ...


class StaticConfig:
    """Flags held in a plain dict: {path: value}. Scope is ignored."""

    def __init__(self, flags: Optional[Mapping[str, Any]] = None):
        self._flags = dict(flags or {})

    def is_set_flag(self, path: str, scope: str) -> bool:
        return bool(self._flags.get(path, False))


class StaticStore:
    def __init__(self, base_url: Optional[str], store_code: str = "default", website_code: str = "base"):
        self._base_url = base_url
        self._store_code = store_code
        self._website_code = website_code

    def get_base_url(self) -> str:
        if not self._base_url:
            raise ScopeError("Store base URL is not configured")
        return self._base_url

    def get_store_code(self) -> str:
        return self._store_code

    def get_website_code(self) -> str:
        return self._website_code


class StaticRequest:
    """Inbound request headers, matched case-insensitively."""

    def __init__(self, headers: Optional[Mapping[str, str]] = None):
        self._headers = {k.lower(): v for k, v in (headers or {}).items()}

    def get_header(self, name: str) -> Optional[str]:
        return self._headers.get(name.lower())


class StaticCookies:
    def __init__(self, cookies: Optional[Mapping[str, str]] = None):
        self._cookies = dict(cookies or {})

    def get_cookie(self, name: str) -> Optional[str]:
        return self._cookies.get(name)


class StaticModuleRegistry:
    def __init__(self, versions: Optional[Mapping[str, str]] = None):
        self._versions = dict(versions or {})

    def get_version(self, module_name: str) -> Optional[str]:
        return self._versions.get(module_name)


class DistributionModuleRegistry:
    """Resolve versions of installed Python distributions.

    `aliases` maps a module name onto a distribution name, e.g.
    {"Webscale_EventStream": "webscale-eventstream"}.
    """

    def __init__(self, aliases: Optional[Mapping[str, str]] = None):
        self._aliases = dict(aliases or {})

    def get_version(self, module_name: str) -> Optional[str]:
        try:
            return metadata.version(self._aliases.get(module_name, module_name))
        except metadata.PackageNotFoundError:
            return None

"""MCP Tool Registry.

Rejestr narzędzi MCP przechowujący informacje o dostępnych narzędziach,
ich schematach argumentów i handlerach. Wszystkie transporty (stdio, HTTP)
wywołują narzędzia przez ten rejestr.
"""

import json
import logging
import os
import socket
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sysinfo_mcp.telemetry.metrics import tool_duration_seconds, tool_invocations_total

logger = logging.getLogger(__name__)

# Dedykowany logger wywołań (plik ustawiany przez MCP_TOOLS_LOG)
mcp_file_logger = logging.getLogger("mcp.tools")


def setup_tools_log(path: Optional[str]) -> None:
    """Skonfiguruj dedykowany plik z historią wywołań narzędzi.

    Args:
        path: Ścieżka pliku logu; None wyłącza zapis.
    """
    if not path or mcp_file_logger.handlers:
        return

    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    mcp_file_logger.addHandler(file_handler)
    mcp_file_logger.setLevel(logging.INFO)
    mcp_file_logger.propagate = False


def _empty_schema() -> Dict[str, Any]:
    return {"type": "object", "properties": {}, "required": []}


@dataclass
class Tool:
    """Definicja narzędzia MCP.

    Attributes:
        name: Unikalny identyfikator narzędzia (np. "get_cpu_info").
        description: Opis działania narzędzia.
        args_schema: JSON Schema dla argumentów wejściowych.
        handler: Funkcja obsługująca wywołanie (async lub sync).
    """

    name: str
    description: str
    args_schema: Dict[str, Any] = field(default_factory=_empty_schema)
    handler: Optional[Callable[..., Any]] = None


@dataclass
class ToolInvokeResult:
    """Wynik wywołania narzędzia MCP.

    Attributes:
        ok: Czy wywołanie zakończyło się sukcesem.
        tool: Nazwa wywołanego narzędzia.
        result: Wynik zwrócony przez handler (dict lub list).
        error: Opis błędu (jeśli ok=False).
        meta: Metadane wywołania (czas, host itp.).
    """

    ok: bool
    tool: str
    result: Any = None
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Konwertuj do słownika."""
        return {
            "ok": self.ok,
            "tool": self.tool,
            "result": self.result,
            "error": self.error,
            "meta": self.meta,
        }

    def to_text(self) -> str:
        """Tekst odpowiedzi: sformatowany JSON albo ``"Error: <message>"``."""
        if not self.ok:
            return f"Error: {self.error}"
        if isinstance(self.result, str):
            return self.result
        return json.dumps(self.result, indent=2, ensure_ascii=False, default=str)


class ToolRegistry:
    """Rejestr narzędzi MCP.

    Przechowuje wszystkie zarejestrowane narzędzia i udostępnia metody
    do ich rejestracji, wyszukiwania i wywoływania.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, Tool] = {}
        self._invocation_count: int = 0
        self._error_count: int = 0
        self._last_invoked_tool: Optional[str] = None
        self._logger = logging.getLogger("mcp.registry")

    def register(self, tool: Tool) -> None:
        """Zarejestruj narzędzie w rejestrze.

        Raises:
            ValueError: Jeśli narzędzie o tej nazwie już istnieje.
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool
        self._logger.debug("Registered tool: %s", tool.name)

    def unregister(self, name: str) -> bool:
        """Wyrejestruj narzędzie; zwraca False jeśli nie istniało."""
        if name in self._tools:
            del self._tools[name]
            self._logger.debug("Unregistered tool: %s", name)
            return True
        return False

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def list_tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def clear(self) -> None:
        """Wyczyść rejestr (usuń wszystkie narzędzia)."""
        self._tools.clear()
        self._invocation_count = 0
        self._error_count = 0
        self._last_invoked_tool = None

    def _failure(self, tool_name: str, error: str, start_time: float, hostname: str) -> ToolInvokeResult:
        duration_ms = int((time.time() - start_time) * 1000)
        self._error_count += 1
        tool_invocations_total.labels(tool=tool_name, status="error").inc()
        self._logger.error("Tool '%s' invocation failed: %s", tool_name, error)
        mcp_file_logger.warning("INVOKE %s -> ERROR: %s", tool_name, error)
        return ToolInvokeResult(
            ok=False,
            tool=tool_name,
            error=error,
            meta={"duration_ms": duration_ms, "host": hostname},
        )

    async def invoke(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolInvokeResult:
        """Wywołaj narzędzie z podanymi argumentami.

        Nigdy nie rzuca wyjątku - błędy handlera są zwracane jako
        ToolInvokeResult z ok=False.

        Args:
            tool_name: Nazwa narzędzia do wywołania.
            arguments: Słownik z argumentami dla narzędzia.

        Returns:
            Wynik wywołania narzędzia.
        """
        start_time = time.time()
        hostname = socket.gethostname()

        tool = self.get(tool_name)
        if not tool:
            return self._failure(tool_name, f"Unknown tool: {tool_name}", start_time, hostname)

        if not tool.handler:
            return self._failure(tool_name, f"Tool '{tool_name}' has no handler", start_time, hostname)

        try:
            args = arguments or {}
            # Sprawdź czy handler jest async
            result = tool.handler(**args)
            if isinstance(result, Awaitable):
                result = await result
        except TypeError as e:
            return self._failure(tool_name, f"Invalid arguments: {e}", start_time, hostname)
        except Exception as e:
            return self._failure(tool_name, str(e) or type(e).__name__, start_time, hostname)

        elapsed = time.time() - start_time
        duration_ms = int(elapsed * 1000)

        self._invocation_count += 1
        self._last_invoked_tool = tool_name
        tool_invocations_total.labels(tool=tool_name, status="success").inc()
        tool_duration_seconds.labels(tool=tool_name).observe(elapsed)

        self._logger.info("Tool '%s' invoked successfully (duration: %dms)", tool_name, duration_ms)
        mcp_file_logger.info("INVOKE %s -> SUCCESS (%dms)", tool_name, duration_ms)

        return ToolInvokeResult(
            ok=True,
            tool=tool_name,
            result=result,
            meta={"duration_ms": duration_ms, "host": hostname},
        )

    def get_stats(self) -> Dict[str, Any]:
        """Pobierz statystyki rejestru."""
        return {
            "total_tools": len(self._tools),
            "invocation_count": self._invocation_count,
            "error_count": self._error_count,
            "last_invoked_tool": self._last_invoked_tool,
        }


# Globalny rejestr narzędzi
registry = ToolRegistry()


def mcp_tool(
    name: str,
    description: str,
    args_schema: Optional[Dict[str, Any]] = None,
) -> Callable:
    """Dekorator do rejestracji funkcji jako narzędzia MCP.

    Args:
        name: Nazwa narzędzia (np. "get_cpu_info").
        description: Opis działania narzędzia.
        args_schema: JSON Schema dla argumentów.

    Example:
        @mcp_tool("get_quick_stats", "Quick overview of CPU, memory and disk")
        async def get_quick_stats():
            ...
    """

    def decorator(func: Callable) -> Callable:
        tool = Tool(
            name=name,
            description=description,
            args_schema=args_schema or _empty_schema(),
            handler=func,
        )
        registry.register(tool)
        return func

    return decorator

"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en `upload` y `doctor`.
"""

from __future__ import annotations

import json

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from core.domain.models import UploadResponse


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (`--json`).
    """

    title = Text("FORMDATA", style="bold cyan")
    subtitle = Text("multipart/form-data • bridge base64 • timeouts", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _status_style(status: int) -> str:
    if 200 <= status < 300:
        return "green"
    if 300 <= status < 400:
        return "yellow"
    return "red"


def build_headers_table(response: UploadResponse) -> Table:
    table = Table(title=f"HTTP {response.status} {response.status_text}".strip())
    table.title_style = _status_style(response.status)
    table.add_column("Header", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key in sorted(response.headers):
        table.add_row(key, response.headers[key])
    return table


def build_body_panel(response: UploadResponse) -> Panel:
    """Panel con el body: JSON resaltado o texto plano."""

    if isinstance(response.data, str):
        body = Text(response.data or "(empty body)")
    else:
        body = Syntax(json.dumps(response.data, ensure_ascii=False, indent=2), "json", word_wrap=True)
    return Panel(body, title="Body", border_style=_status_style(response.status))

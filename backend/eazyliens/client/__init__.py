from .api_client import EazyLiensApiClient, ServerEvent, parse_sse
from .cell_editor import CellEditor
from .controller import GridController, RenderedCell, RenderedRow
from .debounce import Debouncer
from .layout import GridLayout, LayoutStore
from .mutations import OptimisticMutationCoordinator
from .realtime import ListenerState, RealtimeListener
from .state import EditorState, GridState, Notice, NoticeLevel, Selection

__all__ = [
    "EazyLiensApiClient",
    "ServerEvent",
    "parse_sse",
    "CellEditor",
    "GridController",
    "RenderedCell",
    "RenderedRow",
    "Debouncer",
    "GridLayout",
    "LayoutStore",
    "OptimisticMutationCoordinator",
    "ListenerState",
    "RealtimeListener",
    "EditorState",
    "GridState",
    "Notice",
    "NoticeLevel",
    "Selection",
]

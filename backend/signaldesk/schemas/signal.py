from enum import Enum
from typing import Optional

from .common import CamelModel


class SignalType(str, Enum):
    BUY = "Compra"
    SELL = "Venda"


class ProviderRef(CamelModel):
    """Provider fields embedded in a signal card."""

    name: str = "Desconhecido"
    avatar_url: str = ""
    win_rate: float = 0.0


class Signal(CamelModel):
    id: str
    provider: ProviderRef
    pair: str
    type: SignalType
    timeframe: str
    entry: float
    target: float
    stop: float
    justification: str
    image_url: Optional[str] = None
    # Already formatted for display (dd/mm/yyyy).
    timestamp: str


class SignalProvider(CamelModel):
    id: str
    name: str
    avatar_url: str
    win_rate: float
    followers: int
    total_signals: int


class FollowResult(CamelModel):
    success: bool
    following: bool

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

AssetClass = Literal["STOCK", "ETF", "CRYPTO", "OTHER"]
ASSET_CLASSES: tuple = ("STOCK", "ETF", "CRYPTO", "OTHER")


@dataclass(frozen=True)
class Holding:
    """
    An open position owned by exactly one member.

    Prices are per unit; quantity may be fractional (crypto).
    """
    id: str
    member_id: str
    symbol: str
    name: str
    asset_class: AssetClass
    quantity: float
    avg_buy_price: float
    current_price: float
    last_price_update: Optional[datetime] = None
    crypto_id: Optional[str] = None

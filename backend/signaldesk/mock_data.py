"""
Demo dataset served when no backend is configured (or the backend fails).

These are seed values only: the live, mutable copies are built per
`MockStore` by `build_mock_store()`.
"""

from datetime import date

from .schemas import (
    AdminUser,
    ProviderRef,
    Signal,
    SignalProvider,
    SignalType,
    User,
    UserRole,
    UserStatus,
)

MOCK_USERS: list[User] = [
    User(id="1", name="Ana Souza", email="ana@example.com", role=UserRole.FREE, plan="Gratuito"),
    User(id="2", name="Bruno Lima", email="bruno@example.com", role=UserRole.PREMIUM, plan="Premium"),
    User(id="3", name="Carla Mendes", email="carla@example.com", role=UserRole.FREE, plan="Gratuito"),
    User(id="admin", name="Administrador", email="admin@example.com", role=UserRole.PREMIUM, plan="Premium"),
]

MOCK_ADMIN_USERS: list[AdminUser] = [
    AdminUser(id="1", name="Ana Souza", email="ana@example.com", plan="Gratuito",
              status=UserStatus.ACTIVE, join_date=date(2024, 1, 15)),
    AdminUser(id="2", name="Bruno Lima", email="bruno@example.com", plan="Premium",
              status=UserStatus.ACTIVE, join_date=date(2024, 2, 3)),
    AdminUser(id="3", name="Carla Mendes", email="carla@example.com", plan="Gratuito",
              status=UserStatus.SUSPENDED, join_date=date(2024, 3, 22)),
    AdminUser(id="4", name="Diego Rocha", email="diego@example.com", plan="Premium",
              status=UserStatus.ACTIVE, join_date=date(2024, 4, 9)),
]

MOCK_SIGNAL_PROVIDERS: list[SignalProvider] = [
    SignalProvider(id="p1", name="CryptoMaster", avatar_url="https://i.pravatar.cc/150?u=p1",
                   win_rate=78.5, followers=12450, total_signals=342),
    SignalProvider(id="p2", name="BTC Whale", avatar_url="https://i.pravatar.cc/150?u=p2",
                   win_rate=72.1, followers=8930, total_signals=215),
    SignalProvider(id="p3", name="Altcoin Hunter", avatar_url="https://i.pravatar.cc/150?u=p3",
                   win_rate=65.8, followers=5120, total_signals=498),
    SignalProvider(id="p4", name="Scalper Pro", avatar_url="https://i.pravatar.cc/150?u=p4",
                   win_rate=69.3, followers=3310, total_signals=1204),
]


def _provider_ref(provider: SignalProvider) -> ProviderRef:
    return ProviderRef(name=provider.name, avatar_url=provider.avatar_url, win_rate=provider.win_rate)


def _build_mock_signals() -> list[Signal]:
    # (pair, type, timeframe, entry, target, stop)
    setups = [
        ("BTC/USDT", SignalType.BUY, "4H", 67250.0, 69800.0, 65900.0),
        ("ETH/USDT", SignalType.BUY, "1H", 3520.0, 3680.0, 3440.0),
        ("SOL/USDT", SignalType.SELL, "4H", 172.4, 158.0, 179.5),
        ("BNB/USDT", SignalType.BUY, "1D", 598.0, 640.0, 575.0),
        ("XRP/USDT", SignalType.SELL, "1H", 0.5240, 0.4980, 0.5380),
        ("ADA/USDT", SignalType.BUY, "4H", 0.4610, 0.4950, 0.4420),
        ("DOGE/USDT", SignalType.BUY, "15m", 0.1620, 0.1710, 0.1570),
        ("AVAX/USDT", SignalType.SELL, "4H", 36.80, 33.20, 38.60),
        ("LINK/USDT", SignalType.BUY, "1D", 17.45, 19.80, 16.30),
        ("DOT/USDT", SignalType.SELL, "1H", 7.12, 6.70, 7.35),
        ("MATIC/USDT", SignalType.BUY, "4H", 0.7240, 0.7900, 0.6950),
        ("LTC/USDT", SignalType.BUY, "1D", 84.30, 92.00, 80.10),
    ]
    justifications = {
        SignalType.BUY: "Rompimento de resistência com volume acima da média e RSI saindo da zona neutra.",
        SignalType.SELL: "Rejeição na resistência com divergência baixista no RSI e volume decrescente.",
    }

    signals: list[Signal] = []
    for i, (pair, kind, timeframe, entry, target, stop) in enumerate(setups):
        provider = MOCK_SIGNAL_PROVIDERS[i % len(MOCK_SIGNAL_PROVIDERS)]
        day = 25 - i
        signals.append(
            Signal(
                id=f"s{i + 1}",
                provider=_provider_ref(provider),
                pair=pair,
                type=kind,
                timeframe=timeframe,
                entry=entry,
                target=target,
                stop=stop,
                justification=justifications[kind],
                image_url=f"https://picsum.photos/seed/signal{i + 1}/600/300" if i % 3 == 0 else None,
                timestamp=f"{day:02d}/05/2024",
            )
        )
    return signals


MOCK_SIGNALS: list[Signal] = _build_mock_signals()

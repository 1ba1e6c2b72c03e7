# Overview: Wires the stores and engines around one injected session.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from clubpos.time_utils import utcnow
from .catalog_store import CatalogStore
from .checkout_service import CheckoutEngine
from .concurrency import KeyedLocks
from .ledger_service import Ledger
from .member_directory import MemberDirectory
from .wallet_service import WalletService


@dataclass
class PointOfSale:
    """
    Explicitly owned stores and the two commit paths built on them.

    Everything shares `session`, so one commit covers all three stores.
    `locks` must be shared by every PointOfSale serving the same database
    (the Flask app keeps one in app.extensions).
    """
    session: object
    locks: KeyedLocks
    clock: Callable = utcnow
    catalog: CatalogStore = field(init=False)
    members: MemberDirectory = field(init=False)
    ledger: Ledger = field(init=False)
    checkout: CheckoutEngine = field(init=False)
    wallet: WalletService = field(init=False)

    def __post_init__(self):
        self.catalog = CatalogStore(self.session)
        self.members = MemberDirectory(self.session)
        self.ledger = Ledger(self.session)
        self.checkout = CheckoutEngine(
            self.session, self.catalog, self.members, self.ledger, self.locks, clock=self.clock
        )
        self.wallet = WalletService(self.session, self.members, self.ledger, self.locks, clock=self.clock)

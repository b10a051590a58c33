"""Locate, plan, confirm and delete unused global cache entries.

The used-package index must be complete before the engine is built; every
store scan reads it. Stores cover disjoint directory trees, so they are
scanned and cleaned in parallel; inside one store candidates are deleted
one after another.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from flutter_cleaner.cleaner import delete_candidates
from flutter_cleaner.config import GlobalCacheOptions
from flutter_cleaner.exceptions import InvalidStateTransition, UnsupportedPlatformError
from flutter_cleaner.locator import find_unused_entries
from flutter_cleaner.models import (
    CleanupPlan,
    CleanupResult,
    GlobalCleanupResult,
    GlobalUsedIndex,
    StoreKind,
    StorePlan,
    StoreState,
)
from flutter_cleaner.scanner import path_size
from flutter_cleaner.stores import store_root

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[CleanupPlan], bool]

ALLOWED_TRANSITIONS: dict[StoreState, frozenset[StoreState]] = {
    StoreState.IDLE: frozenset({StoreState.SCANNING}),
    StoreState.SCANNING: frozenset({StoreState.PLANNED}),
    StoreState.PLANNED: frozenset({StoreState.CONFIRMED, StoreState.CANCELLED}),
    StoreState.CONFIRMED: frozenset({StoreState.EXECUTING}),
    StoreState.EXECUTING: frozenset({StoreState.DONE}),
    StoreState.CANCELLED: frozenset(),
    StoreState.DONE: frozenset(),
}


class GlobalCacheCleanupEngine:
    """Cleans the Gradle, Pub and CocoaPods caches against a used-package index."""

    def __init__(
        self,
        index: GlobalUsedIndex,
        options: Optional[GlobalCacheOptions] = None,
        roots: Optional[dict[StoreKind, Path]] = None,
        max_workers: int = 3,
    ):
        self.index = index
        self.options = options or GlobalCacheOptions()
        self.max_workers = max_workers
        self._roots = dict(roots or {})
        self._states: dict[StoreKind, StoreState] = {
            store: StoreState.IDLE for store in self.enabled_stores
        }

    @property
    def enabled_stores(self) -> list[StoreKind]:
        enabled = {
            StoreKind.GRADLE: self.options.gradle,
            StoreKind.PUB: self.options.pub_cache,
            StoreKind.COCOAPODS: self.options.cocoapods,
        }
        return [store for store in StoreKind if enabled[store]]

    def state(self, store: StoreKind) -> StoreState:
        return self._states.get(store, StoreState.IDLE)

    def _check_transition(self, store: StoreKind, target: StoreState) -> None:
        current = self.state(store)
        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidStateTransition(store.value, current.value, target.value)

    def _transition(self, store: StoreKind, target: StoreState) -> None:
        self._check_transition(store, target)
        self._states[store] = target

    def _transition_all(self, stores: list[StoreKind], target: StoreState) -> None:
        """Move every store to ``target``, or none of them if any move is illegal."""
        for store in stores:
            self._check_transition(store, target)
        for store in stores:
            self._states[store] = target

    def _resolve_root(self, store: StoreKind) -> Path:
        if store in self._roots:
            return self._roots[store]
        return store_root(store)

    def _plan_store(self, store: StoreKind) -> StorePlan:
        self._transition(store, StoreState.SCANNING)
        try:
            root = self._resolve_root(store)
            entries = find_unused_entries(store, self.index, root)
        except UnsupportedPlatformError as e:
            logger.info("%s", e)
            self._transition(store, StoreState.PLANNED)
            return StorePlan(store=store, error=str(e))

        measured = [e.model_copy(update={"size_bytes": path_size(e.path)}) for e in entries]
        self._transition(store, StoreState.PLANNED)
        return StorePlan(
            store=store,
            root=root,
            entries=measured,
            estimated_bytes=sum(e.size_bytes or 0 for e in measured),
        )

    def plan(self) -> CleanupPlan:
        """
        Scan every enabled store and measure its candidates. No deletion.

        A store that is unavailable on this host gets a plan with ``error``
        set; the other stores are unaffected.

        Returns:
            CleanupPlan with one StorePlan per enabled store
        """
        self._states = {store: StoreState.IDLE for store in self.enabled_stores}

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {store: executor.submit(self._plan_store, store) for store in self.enabled_stores}
            stores = {store: future.result() for store, future in futures.items()}

        plan = CleanupPlan(stores=stores)
        logger.debug(
            "Planned %d candidates (%d bytes)", plan.total_candidates, plan.total_bytes
        )
        return plan

    def _execute_store(self, store_plan: StorePlan, dry_run: bool) -> CleanupResult:
        store = store_plan.store
        self._transition(store, StoreState.EXECUTING)

        if store_plan.error:
            result = CleanupResult(
                name=store.value,
                state=StoreState.DONE,
                dry_run=dry_run,
                unavailable=store_plan.error,
            )
        else:
            result = delete_candidates(
                store.value,
                store_plan.candidate_paths,
                dry_run=dry_run,
                estimated_sizes={e.path: e.size_bytes or 0 for e in store_plan.entries},
            )

        self._transition(store, StoreState.DONE)
        return result

    def execute(
        self,
        plan: CleanupPlan,
        dry_run: bool = False,
        confirm: Optional[ConfirmCallback] = None,
    ) -> GlobalCleanupResult:
        """
        Carry out a plan produced by :meth:`plan`.

        Args:
            plan: Plan from this engine
            dry_run: If True, report what would be deleted without deleting
            confirm: Optional callback shown the plan; False cancels everything

        Returns:
            GlobalCleanupResult with one CleanupResult per planned store

        Raises:
            InvalidStateTransition: if the plan was not produced by this engine
                or has already been executed
        """
        if confirm is not None and not confirm(plan):
            self._transition_all(list(plan.stores), StoreState.CANCELLED)
            logger.info("Global cache cleanup cancelled")
            return GlobalCleanupResult(
                stores={
                    store: CleanupResult(name=store.value, state=StoreState.CANCELLED, dry_run=dry_run)
                    for store in plan.stores
                },
                dry_run=dry_run,
                cancelled=True,
            )

        self._transition_all(list(plan.stores), StoreState.CONFIRMED)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                store: executor.submit(self._execute_store, store_plan, dry_run)
                for store, store_plan in plan.stores.items()
            }
            results = {store: future.result() for store, future in futures.items()}

        return GlobalCleanupResult(stores=results, dry_run=dry_run)

    def run(
        self,
        dry_run: bool = False,
        confirm: Optional[ConfirmCallback] = None,
    ) -> GlobalCleanupResult:
        """Plan then execute."""
        return self.execute(self.plan(), dry_run=dry_run, confirm=confirm)

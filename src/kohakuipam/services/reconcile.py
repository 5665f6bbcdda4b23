"""
Reconciliation service.

Caller-side wrapper around the engine: loads documents, runs a pass, logs
the outcome and persists the table only when the pass succeeded. The engine
itself never logs.
"""

from dataclasses import dataclass, field

from kohakuipam.core.reconciler import IPAMReconciler
from kohakuipam.core.report import PoolUsage, summarize_pool_usage
from kohakuipam.exceptions import IPAMError
from kohakuipam.models.pool import DatacenterAllocations, IPAMAllocation, IPAMPool
from kohakuipam.storage.documents import load_pool, load_table, save_table
from kohakuipam.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of one apply or dry run."""

    pool_name: str
    allocations: list[IPAMAllocation] = field(default_factory=list)
    dry_run: bool = False
    saved_to: str | None = None

    @property
    def changed(self) -> bool:
        return bool(self.allocations)


class ReconcileService:
    """
    Applies pool spec documents to an allocation table document.

    Every call reloads the table from disk, so one service instance can be
    reused across calls. Writes are not locked; run one call at a time per
    table file.
    """

    def __init__(self, table_path: str, backup: bool = True):
        self.table_path = table_path
        self.backup = backup

    def load_table(self) -> DatacenterAllocations:
        return load_table(self.table_path)

    def apply_pool_file(
        self,
        pool_path: str,
        dry_run: bool = False,
        output_path: str | None = None,
    ) -> ReconcileResult:
        """Load a pool spec document and apply it. See apply_pool."""
        return self.apply_pool(load_pool(pool_path), dry_run, output_path)

    def apply_pool(
        self,
        pool: IPAMPool,
        dry_run: bool = False,
        output_path: str | None = None,
    ) -> ReconcileResult:
        """
        Apply pool to the table document.

        Args:
            pool: Pool spec to apply.
            dry_run: Compute the new allocations without saving anything.
            output_path: Save the updated table here instead of in place.

        Raises:
            IPAMError: Engine or document error; nothing is saved.
        """
        table = self.load_table()
        reconciler = IPAMReconciler(table)
        logger.info(
            f"{'Planning' if dry_run else 'Applying'} pool '{pool.name}' "
            f"on {len(pool.datacenters)} datacenter(s)"
        )

        try:
            if dry_run:
                allocations = [item.allocation for item in reconciler.plan(pool)]
            else:
                allocations = reconciler.apply(pool)
        except IPAMError as e:
            logger.error(f"Pool '{pool.name}' not applied: {e}")
            raise

        for allocation in allocations:
            logger.debug(
                f"[{allocation.datacenter}] {allocation.cluster} <- "
                f"{allocation.cidr or ', '.join(allocation.addresses or [])}"
            )

        result = ReconcileResult(
            pool_name=pool.name, allocations=allocations, dry_run=dry_run
        )
        if dry_run:
            logger.info(
                f"Dry run: pool '{pool.name}' would add "
                f"{len(allocations)} allocation(s)"
            )
            return result

        if not allocations and output_path is None:
            logger.info(f"Pool '{pool.name}' is up to date, nothing to save")
            return result

        target = output_path or self.table_path
        save_table(target, table, backup=self.backup)
        result.saved_to = target
        logger.info(
            f"Pool '{pool.name}' applied: {len(allocations)} new allocation(s), "
            f"saved to {target}"
        )
        return result

    def usage_for_pool_file(self, pool_path: str) -> list[PoolUsage]:
        """Usage report of a pool spec document against the table."""
        pool = load_pool(pool_path)
        return summarize_pool_usage(self.load_table(), pool)

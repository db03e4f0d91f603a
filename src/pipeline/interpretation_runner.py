"""Parallel interpretation runner.

This module drives aspect chains over verbatim records. Lookups are
acquired in ``setup`` and released in ``teardown``; between the two the
runner only reads them, so records can be interpreted concurrently on
a thread pool. Each record yields an explicit ``RecordOutcome`` holding
either its interpreted records or the fatal error that stopped it.
"""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import threading
from typing import Any, Iterable

from core.config import BiotraceConfig
from core.constants import ERROR_POLICY_FAIL, ERROR_POLICY_SKIP, SUPPORTED_ERROR_POLICIES
from core.errors import BiotraceConfigError, BiotraceError, BiotraceInterpretationError
from core.logging_config import get_logger
from core.records import InterpretedRecord, RecordAspect, VerbatimRecord
from identity.unique_key import UniqueKeyConfig
from interpretation.chain import InterpretationChain
from interpretation.issues import IssueType
from interpretation.trace import Trace
from interpreters.aspects import AspectServices, build_chains
from interpreters.vocabulary import UnmatchedPolicy, VocabularySupport
from lookups.metadata_store import DatasetMetadata, YamlMetadataStore
from lookups.vocabulary_service import FileVocabularyService

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class InterpretationOptions:
    """Options for one interpretation run.

    Attributes:
        dataset_id: Dataset the verbatim records belong to.
        aspects: Aspects to interpret, in output order.
        error_policy: ``skip`` drops failed records, ``fail`` raises.
        unmatched_policy: Handling of values without vocabulary match.
        with_unique_keys: Generate a unique key for every record.
    """

    dataset_id: str
    aspects: tuple[RecordAspect, ...] = tuple(RecordAspect)
    error_policy: str = ERROR_POLICY_SKIP
    unmatched_policy: UnmatchedPolicy = UnmatchedPolicy.SILENT
    with_unique_keys: bool = False


@dataclass(frozen=True)
class InterpretationServices:
    """Shared read-only lookups for one worker lifecycle.

    Attributes:
        vocabulary_service: Vocabulary service, None when not configured.
        metadata_store: Attribution store, None when not configured.
    """

    vocabulary_service: FileVocabularyService | None = None
    metadata_store: YamlMetadataStore | None = None

    @classmethod
    def acquire(cls, config: BiotraceConfig) -> "InterpretationServices":
        """Open every configured lookup.

        Raises:
            BiotraceLookupError: If a configured lookup cannot be loaded.
        """
        vocabulary_service = None
        if config.vocabulary_path is not None:
            vocabulary_service = FileVocabularyService.from_yaml(config.vocabulary_path)
        metadata_store = None
        if config.metadata_path is not None:
            try:
                metadata_store = YamlMetadataStore(config.metadata_path)
            except BiotraceError:
                if vocabulary_service is not None:
                    vocabulary_service.close()
                raise
        return cls(vocabulary_service=vocabulary_service, metadata_store=metadata_store)

    def vocabulary_support(self, unmatched_policy: UnmatchedPolicy) -> VocabularySupport:
        if self.vocabulary_service is None:
            return VocabularySupport.disabled()
        return VocabularySupport.enabled(self.vocabulary_service, unmatched_policy)

    def dataset_metadata(self, dataset_id: str) -> DatasetMetadata | None:
        if self.metadata_store is None:
            return None
        return self.metadata_store.get(dataset_id)

    def close(self) -> None:
        if self.vocabulary_service is not None and not self.vocabulary_service.closed:
            self.vocabulary_service.close()
        if self.metadata_store is not None and not self.metadata_store.closed:
            self.metadata_store.close()


class IssueCounter:
    """Thread-safe tally of issue traces by issue type."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Counter[str] = Counter()

    def record(self, trace: Trace[IssueType]) -> None:
        with self._lock:
            self._counts[trace.context.name] += 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(self._counts.items()))

    @property
    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())


@dataclass(frozen=True)
class RecordOutcome:
    """Interpretation result for one verbatim record.

    Attributes:
        record_id: Verbatim record identifier.
        records: Interpreted record per applicable aspect.
        unique_key: Unique key, when requested and buildable.
        error: Fatal error that stopped this record, if any.
        traces: Issue traces raised by every aspect, in aspect order.
    """

    record_id: str
    records: dict[RecordAspect, InterpretedRecord] = field(default_factory=dict)
    unique_key: str | None = None
    error: BiotraceError | None = None
    traces: tuple[Trace[IssueType], ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


class InterpretationRunner:
    """Interpret verbatim records for one dataset.

    Use as a context manager, or call ``setup`` and ``teardown``
    explicitly around ``run``.
    """

    def __init__(self, options: InterpretationOptions, config: BiotraceConfig) -> None:
        if options.error_policy not in SUPPORTED_ERROR_POLICIES:
            raise BiotraceConfigError(
                f"Unsupported error policy '{options.error_policy}'. "
                f"Use one of: {', '.join(SUPPORTED_ERROR_POLICIES)}."
            )
        self._options = options
        self._config = config
        self._services: InterpretationServices | None = None
        self._chains: dict[RecordAspect, InterpretationChain[VerbatimRecord, Any]] = {}
        self._key_config: UniqueKeyConfig | None = None
        self.issue_counter = IssueCounter()

    def setup(self, services: InterpretationServices | None = None) -> None:
        """Acquire lookups and build the aspect chains once.

        Args:
            services: Pre-acquired lookups; acquired from config when None.
                The runner owns and closes them either way.

        Raises:
            BiotraceConfigError: If unique keys are requested without a
                metadata store.
            BiotraceLookupError: If a lookup cannot be loaded.
            BiotraceUniqueKeyError: If the dataset has no unique terms.
        """
        if self._services is not None:
            return
        acquired = services
        if acquired is None:
            acquired = InterpretationServices.acquire(self._config)
        try:
            metadata = acquired.dataset_metadata(self._options.dataset_id)
            aspect_services = AspectServices(
                vocabulary=acquired.vocabulary_support(self._options.unmatched_policy),
                metadata=metadata,
            )
            self._chains = build_chains(self._options.aspects, aspect_services)
            self._key_config = self._build_key_config(metadata)
        except BiotraceError:
            acquired.close()
            raise
        self._services = acquired
        _LOGGER.info(
            "interpretation_setup",
            dataset_id=self._options.dataset_id,
            aspects=[aspect.value for aspect in self._options.aspects],
            vocabulary_enabled=acquired.vocabulary_service is not None,
            unique_keys=self._key_config is not None,
        )

    def _build_key_config(self, metadata: DatasetMetadata | None) -> UniqueKeyConfig | None:
        if not self._options.with_unique_keys:
            return None
        if metadata is None:
            raise BiotraceConfigError(
                "Unique keys require dataset metadata. "
                "Set BIOTRACE_METADATA_PATH to a metadata YAML file."
            )
        return UniqueKeyConfig.from_metadata(
            metadata,
            strict=self._config.strict_unique_keys,
            delimiter=self._config.key_delimiter,
        )

    def teardown(self) -> None:
        """Release lookups acquired in ``setup``; safe to call twice."""
        if self._services is None:
            return
        services = self._services
        self._services = None
        self._chains = {}
        self._key_config = None
        services.close()

    def __enter__(self) -> "InterpretationRunner":
        self.setup()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()

    def interpret_record(self, record: VerbatimRecord) -> RecordOutcome:
        """Interpret every requested aspect of one record.

        Args:
            record: Verbatim record.

        Returns:
            Outcome with the applicable aspect records and unique key, or
            with the fatal error that stopped the record.

        Raises:
            BiotraceInterpretationError: If ``setup`` has not run.
        """
        if self._services is None:
            raise BiotraceInterpretationError(
                "Interpretation runner is not set up. Call setup() or use it as a "
                "context manager before interpreting records."
            )
        records: dict[RecordAspect, InterpretedRecord] = {}
        traces: list[Trace[IssueType]] = []
        try:
            for aspect, chain in self._chains.items():
                result = chain.run(record)
                result.for_each_trace(traces.append)
                interpreted = result.get_or_none()
                if interpreted is not None:
                    records[aspect] = interpreted
            unique_key = None
            if self._key_config is not None:
                unique_key = self._key_config.key_for(record)
        except BiotraceError as error:
            return RecordOutcome(record_id=record.id, error=error)
        return RecordOutcome(
            record_id=record.id,
            records=records,
            unique_key=unique_key,
            traces=tuple(traces),
        )

    def _interpret_counted(self, record: VerbatimRecord) -> RecordOutcome:
        outcome = self.interpret_record(record)
        if outcome.ok:
            for trace in outcome.traces:
                self.issue_counter.record(trace)
        return outcome

    def run(self, records: Iterable[VerbatimRecord]) -> list[RecordOutcome]:
        """Interpret records in parallel.

        Records are independent; outcomes come back in input order.
        ``issue_counter`` is reset and then tallies the issues of the
        records this run keeps.

        Args:
            records: Verbatim records to interpret.

        Returns:
            Successful outcomes. Failed records are dropped under the
            ``skip`` policy.

        Raises:
            BiotraceError: The first record failure under the ``fail`` policy.
        """
        self.issue_counter = IssueCounter()
        with ThreadPoolExecutor(max_workers=self._config.worker_count) as executor:
            outcomes = list(executor.map(self._interpret_counted, records))
        succeeded: list[RecordOutcome] = []
        for outcome in outcomes:
            if outcome.error is None:
                succeeded.append(outcome)
                continue
            if self._options.error_policy == ERROR_POLICY_FAIL:
                raise outcome.error
            _LOGGER.warning(
                "record_skipped",
                dataset_id=self._options.dataset_id,
                record_id=outcome.record_id,
                error=str(outcome.error),
            )
        _LOGGER.info(
            "interpretation_completed",
            dataset_id=self._options.dataset_id,
            input_count=len(outcomes),
            output_count=len(succeeded),
            skipped_count=len(outcomes) - len(succeeded),
            issue_total=self.issue_counter.total,
            issue_counts=self.issue_counter.snapshot(),
        )
        return succeeded

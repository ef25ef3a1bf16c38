"""Service orchestrating the delta resolution pipeline."""

import logging
from collections.abc import Callable

from metadelta.common.config import DeltaConfig
from metadelta.git.domain.value_objects import ChangeRecord
from metadelta.git.repositories.implementations import GitChangeReportRepository
from metadelta.git.repositories.interfaces import ChangeReportRepository
from metadelta.git.services.status_parser import StatusLineParser
from metadelta.metadata.repositories.registry import MetadataRegistry, default_registry
from metadelta.metadata.services.identity_resolver import IdentityResolver
from metadelta.policy.domain.value_objects import PolicySet
from metadelta.policy.repositories.implementations import FilePolicyListRepository
from metadelta.policy.repositories.interfaces import PolicyListRepository
from metadelta.policy.services.policy_filter import PolicyFilterService
from metadelta.resolution.domain.value_objects import ResolutionStage, ResolutionState
from metadelta.resolution.services.dependency_expander import DependencyExpander
from metadelta.resolution.services.move_collapser import MoveCollapser

logger = logging.getLogger(__name__)


class DeltaResolutionService:
    """Service turning a change report into the final list of status lines."""

    def __init__(
        self,
        change_report_repository: ChangeReportRepository,
        policy_repository: PolicyListRepository,
        registry: MetadataRegistry,
    ) -> None:
        """
        Initialize DeltaResolutionService.

        Args:
            change_report_repository: Source of change reports and file contents
            policy_repository: Loader for ignore and include lists
            registry: Metadata type registry used by every stage
        """
        self._change_report_repository = change_report_repository
        self._policy_repository = policy_repository
        self._registry = registry

    def resolve_filtered_changes(self, config: DeltaConfig) -> list[str]:
        """
        Resolve the final ordered status lines for a revision range.

        Args:
            config: Run configuration

        Returns:
            Natural records in report order, then force-included records, then
            records added by dependency expansion
        """
        return self.run(config).lines

    def resolve_forced_includes(self, config: DeltaConfig) -> list[str]:
        """
        Synthesize status lines for the force-include lists only.

        Args:
            config: Run configuration

        Returns:
            ADDED lines for constructive includes, then DELETED lines for
            destructive includes
        """
        policy_filter = PolicyFilterService(self._load_policies(config))
        forced = policy_filter.forced_records(self._tracked_files(config))
        return [record.line for record in forced]

    def run(self, config: DeltaConfig) -> ResolutionState:
        """
        Run every pipeline stage and return the final state.

        Args:
            config: Run configuration

        Returns:
            ResolutionState at the FINAL stage

        Raises:
            SourceStreamFailure: If the change report could not be produced
            UnsupportedStatusCode: If the report holds an unsupported status
            PolicyListNotFound: If a configured policy list is missing
        """
        policies = self._load_policies(config)
        lines = list(self._change_report_repository.list_changes(config.diff_range()))

        parser = StatusLineParser(self._registry, config.source)
        state = ResolutionState(records=parser.parse_lines(lines))
        logger.info("Parsed %d of %d report lines", len(state.records), len(lines))

        resolver = IdentityResolver(self._registry)
        tagged = [resolver.tag(record) for record in state.records]
        state.advance(ResolutionStage.IDENTITY_TAGGED, [item.record for item in tagged])

        state.advance(ResolutionStage.COLLAPSED, MoveCollapser().collapse(tagged))

        policy_filter = PolicyFilterService(policies)
        kept = policy_filter.filter(state.records)
        present = set(kept)
        forced = [
            record
            for record in policy_filter.forced_records(self._tracked_files(config))
            if record not in present
        ]
        state.advance(ResolutionStage.FILTERED, kept + forced)

        injected: list[ChangeRecord] = []
        if config.generate_delta:
            expander = DependencyExpander(
                self._change_report_repository,
                self._registry,
                config.repo_path,
                config.to_revision,
                max_workers=config.max_workers,
            )
            injected = expander.expand(state.records)
        state.advance(ResolutionStage.EXPANDED, state.records + injected)

        state.advance(ResolutionStage.FINAL, state.records)
        logger.info(
            "Resolved %d records (%d forced, %d dependencies)",
            len(state.records),
            len(forced),
            len(injected),
        )
        return state

    def _load_policies(self, config: DeltaConfig) -> PolicySet:
        return PolicySet(
            ignore_constructive=self._policy_repository.load(config.ignore),
            ignore_destructive=(
                self._policy_repository.load(config.ignore_destructive)
                if config.ignore_destructive is not None
                else None
            ),
            force_include_constructive=self._policy_repository.load(config.include),
            force_include_destructive=self._policy_repository.load(config.include_destructive),
        )

    def _tracked_files(self, config: DeltaConfig) -> Callable[[], tuple[str, ...]]:
        return lambda: self._change_report_repository.list_tracked_files(
            config.repo_path, config.to_revision
        )


def create_resolution_service(registry: MetadataRegistry | None = None) -> DeltaResolutionService:
    """Build a service wired to git and file-backed policy lists."""
    return DeltaResolutionService(
        change_report_repository=GitChangeReportRepository(),
        policy_repository=FilePolicyListRepository(),
        registry=registry if registry is not None else default_registry(),
    )


def resolve_filtered_changes(config: DeltaConfig) -> list[str]:
    """Resolve the final status lines using the default service."""
    return create_resolution_service().resolve_filtered_changes(config)


def resolve_forced_includes(config: DeltaConfig) -> list[str]:
    """Synthesize force-include status lines using the default service."""
    return create_resolution_service().resolve_forced_includes(config)

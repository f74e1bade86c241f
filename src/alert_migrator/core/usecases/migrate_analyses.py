from __future__ import annotations

from ..domain.models import CodeScanningAnalysis, RunSummary, SarifUpload
from ..ports import GithubApiPort, LoggerPort
from ..services import ArtifactReplicator


class MigrateAnalysesUseCase:
    """Use case for copying code scanning analyses (SARIF reports).

    Downloads each analysis from the source and uploads it to the target in
    creation order, delegating ordering and failure handling to ArtifactReplicator.
    """

    def __init__(
        self,
        *,
        source_api: GithubApiPort,
        target_api: GithubApiPort,
        replicator: ArtifactReplicator,
        logger: LoggerPort,
    ) -> None:
        self._source_api = source_api
        self._target_api = target_api
        self._replicator = replicator
        self._logger = logger

    def execute(
        self,
        *,
        source_owner: str,
        source_repo: str,
        target_owner: str,
        target_repo: str,
        ref: str | None = None,
        dry_run: bool = False,
    ) -> RunSummary:
        """Migrate analyses of ``ref`` (all refs when None).

        Returns:
            Summary with one entry per analysis

        Raises:
            GithubApiError: If fetching fails or an upload fails fatally
        """
        self._logger.info(
            "analyses_started",
            source=f"{source_owner}/{source_repo}",
            target=f"{target_owner}/{target_repo}",
            ref=ref,
            dry_run=dry_run,
        )
        analyses = list(self._source_api.get_code_scanning_analyses(source_owner, source_repo, ref))
        self._logger.info("analyses_fetched", count=len(analyses))

        def upload(analysis: CodeScanningAnalysis) -> None:
            sarif = self._source_api.get_sarif_report(source_owner, source_repo, analysis.id)
            self._logger.debug("sarif_downloaded", analysis_id=analysis.id, size=len(sarif))
            self._target_api.upload_sarif_report(
                target_owner,
                target_repo,
                SarifUpload(sarif=sarif, ref=analysis.ref, commit_sha=analysis.commit_sha),
            )

        summary = self._replicator.replicate(analyses, upload, dry_run=dry_run)
        self._logger.info("analyses_done", **summary.to_dict())
        return summary

"""Job layer package for workflow orchestration boundaries."""

from .interfaces import JobExecutionResult, JobOrchestratorPort
from .deploy_publish_orchestrator import PUBLISH_FAILED_AFTER_DEPLOY_CODE, DeployPublishOrchestrator

__all__ = [
	"JobExecutionResult",
	"JobOrchestratorPort",
	"DeployPublishOrchestrator",
	"PUBLISH_FAILED_AFTER_DEPLOY_CODE",
]

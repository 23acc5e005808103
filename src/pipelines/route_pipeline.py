"""Routing pipeline for ad-hoc queries."""

from agent_router.builder import RouterBuilder
from agent_router.router import AgentRouter
from shared.base_provider import EmbeddingProvider
from shared.data_types import RouteDecision
from utils.config_loader import AppConfig, ConfigLoader
from utils.logger import get_logger, log_route_decision


class RoutingPipeline:
    """Pipeline for routing queries with a configured router."""

    def __init__(
        self,
        config_path: str = "config/router_config.yaml",
        config: AppConfig | None = None,
        provider: EmbeddingProvider | None = None,
    ):
        self.config = config or ConfigLoader(config_path).load_config()
        self.provider = provider
        self.logger = get_logger(f"{__name__}.RoutingPipeline")
        self.router: AgentRouter | None = None

    def run(self, queries: list[str]) -> list[RouteDecision]:
        """
        Route each query.

        Args:
            queries: User queries

        Returns:
            One decision per query, in order
        """
        if self.router is None:
            self.router = RouterBuilder(self.config, provider=self.provider).build()
            self.router.initialize()

        self.logger.info(
            f"Routing {len(queries)} queries (router state: {self.router.state.value})"
        )

        decisions = []
        for query in queries:
            decision = self.router.route_with_details(query)
            log_route_decision(self.logger, query, decision)
            decisions.append(decision)

        return decisions

# views/learn.py

from typing import List
from core.gateway import GatewayClient
from core.models import LearningResource
from .base import FeatureView


class LearnView(FeatureView):
    name = "learn"

    def __init__(self, gateway: GatewayClient):
        super().__init__()
        self.gateway = gateway

    @property
    def resources(self) -> List[LearningResource]:
        return self.state.result or []

    def load(self) -> bool:
        return self._run(self.gateway.fetch_learning_resources)

from typing import Dict, List, Optional

from chartsmith.schemas.chart import ChartType
from chartsmith.viz.base import IChartRenderer


class RendererFactory:
    def __init__(self) -> None:
        self._renderers: Dict[ChartType, IChartRenderer] = {}

    def register(self, chart_type: ChartType, renderer: IChartRenderer) -> None:
        self._renderers[chart_type] = renderer

    def get(self, chart_type: ChartType) -> Optional[IChartRenderer]:
        return self._renderers.get(chart_type)

    def list_keys(self) -> List[str]:
        return sorted(chart_type.value for chart_type in self._renderers)


factory = RendererFactory()

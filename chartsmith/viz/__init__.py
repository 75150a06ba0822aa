from chartsmith.schemas.chart import ChartType
from chartsmith.viz.registry import factory
from chartsmith.viz.strategies.area import AreaRenderer
from chartsmith.viz.strategies.bar import BarRenderer
from chartsmith.viz.strategies.bar_stacked import BarStackedRenderer
from chartsmith.viz.strategies.funnel import FunnelRenderer
from chartsmith.viz.strategies.heatmap import HeatmapRenderer
from chartsmith.viz.strategies.line import LineRenderer
from chartsmith.viz.strategies.retention import RetentionRenderer
from chartsmith.viz.strategies.scatter import ScatterRenderer

# Register default renderers at import time
factory.register(ChartType.LINE, LineRenderer())
factory.register(ChartType.AREA, AreaRenderer())
factory.register(ChartType.BAR, BarRenderer())
factory.register(ChartType.BAR_STACKED, BarStackedRenderer())
factory.register(ChartType.HEATMAP, HeatmapRenderer())
factory.register(ChartType.SCATTER, ScatterRenderer())
factory.register(ChartType.FUNNEL, FunnelRenderer())
factory.register(ChartType.RETENTION, RetentionRenderer())

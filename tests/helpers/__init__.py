from .metric_delta import metric_delta, sample_value

__all__ = ["metric_delta", "sample_value"]

from .compare import compare_traces, is_monotonic, trace_array, traces_equivalent
__all__ = ["compare_traces", "is_monotonic", "trace_array", "traces_equivalent"]

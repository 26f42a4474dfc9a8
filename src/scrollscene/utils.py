def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))

def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation; exact at t == 0 and t == 1."""
    if t <= 0.0:
        return start
    if t >= 1.0:
        return end
    return start + (end - start) * t

def snap_angle(angle, step):
    """
    Round an angle in degrees to the nearest multiple of `step`.

    Ties go to the even multiple (Python's round), so 7.5 with a 15 degree step
    snaps to 0 and 22.5 snaps to 30.
    """
    if step <= 0:
        raise ValueError(f"Angle snap step must be positive, got {step}")
    return round(angle / step) * step

# geogroup/errors.py


class GeoGroupError(Exception):
    pass


class InvalidCapacityError(GeoGroupError, ValueError):
    """max_points_per_cluster must be >= 1; smaller values cannot be satisfied."""

    def __init__(self, max_points_per_cluster):
        self.max_points_per_cluster = max_points_per_cluster
        super().__init__(
            f"max_points_per_cluster must be >= 1 (got {max_points_per_cluster!r})"
        )


class FacilityFileError(GeoGroupError, ValueError):
    def __init__(self, path, problems):
        self.path = path
        self.problems = list(problems)
        super().__init__(f"{path}: " + "; ".join(self.problems))

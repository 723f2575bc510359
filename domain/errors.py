# -*- coding: utf-8 -*-


class ValidationError(ValueError):
    """Rejected operation. Raised before any state is touched."""

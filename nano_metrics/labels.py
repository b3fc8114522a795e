"""
Completion of caller-supplied label sets.
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


class LabelReconciler:
    """Fill in process-wide label defaults missing from an observation.

    The default mapping is copied at construction and never written again,
    so concurrent ``reconcile`` calls need no locking. Keys the caller did
    supply are left untouched, and unknown keys are passed through for the
    collector to reject.
    """

    def __init__(self, defaults: Optional[Mapping[str, str]] = None):
        self._defaults = MappingProxyType(dict(defaults or {}))
        self._keys = tuple(sorted(self._defaults))

    @property
    def defaults(self) -> Mapping[str, str]:
        return self._defaults

    @property
    def keys(self) -> Tuple[str, ...]:
        """Additional label keys in registration order."""
        return self._keys

    def reconcile(self, labels: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Return a copy of ``labels`` with every default key present."""
        reconciled = dict(labels or {})
        for key, default in self._defaults.items():
            if key not in reconciled:
                reconciled[key] = default
        return reconciled

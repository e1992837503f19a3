"""
Test module structure and imports.
"""


def test_package_imports():
    """Test that the public API can be imported from the package root."""
    from reposcope import (
        Repository,
        ScanCoordinator,
        CacheHydrator,
        StateStore,
        Workspace,
        LockBusyError,
    )

    assert Repository is not None
    assert ScanCoordinator is not None
    assert CacheHydrator is not None
    assert StateStore is not None
    assert Workspace is not None
    assert LockBusyError is not None


def test_exception_hierarchy():
    """Every error derives from ReposcopeException."""
    from reposcope import (
        ReposcopeException,
        ConflictError,
        LockBusyError,
        ScanBackendError,
        PartialRefreshError,
        InvalidScanRequestError,
        ConfigurationError,
        BatchExecutionError,
    )

    for error in (ConflictError, LockBusyError, ScanBackendError, PartialRefreshError,
                  InvalidScanRequestError, ConfigurationError, BatchExecutionError):
        assert issubclass(error, ReposcopeException)


def test_module_all_exports():
    """Test that __all__ is properly defined."""
    import reposcope
    from reposcope import core

    assert hasattr(core, '__all__')
    for item in ['PathConflictDetector', 'AggregationEngine', 'MergeEngine',
                 'ScanCoordinator', 'CacheHydrator', 'StateStore']:
        assert item in core.__all__, f"{item} not found in __all__"

    for name in reposcope.__all__:
        assert hasattr(reposcope, name), f"{name} missing from reposcope"

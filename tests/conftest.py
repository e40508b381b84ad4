# tests/conftest.py

import pytest
from factories import FULL_FS_STATS, make_container, make_pod, make_summary


@pytest.fixture(autouse=True)
def reset_k8s_config_state(monkeypatch):
    """
    Autouse fixture so every test starts with no Kubernetes configuration loaded.
    The loader keeps a module-level flag once a config was loaded successfully.
    """
    from kube_summary_exporter.core import k8s_client

    monkeypatch.setattr(k8s_client, "_CONFIG_LOADED", False)


@pytest.fixture
def scenario_a_summary():
    """Node n1, pod (p1, ns1), container c1 with logs.usedBytes=100 and no inodesFree."""
    return make_summary(
        "n1",
        pods=[make_pod("p1", "ns1", containers=[make_container("c1", logs={"usedBytes": 100})])],
    )


@pytest.fixture
def sample_summaries():
    """Two fully populated node summaries."""
    return {
        "n1": make_summary(
            "n1",
            pods=[
                make_pod(
                    "p1",
                    "ns1",
                    containers=[make_container("c1", logs=FULL_FS_STATS, rootfs=FULL_FS_STATS)],
                    ephemeral=FULL_FS_STATS,
                )
            ],
            image_fs=FULL_FS_STATS,
        ),
        "n2": make_summary(
            "n2",
            pods=[make_pod("p2", "ns2", containers=[make_container("c2", logs={"usedBytes": 7})])],
            image_fs={"usedBytes": 123},
        ),
    }

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from typing import List, Optional

from kloudlib.components.models import AddressPool, MetalLBInputs
from kloudlib.engine.component import STABLE_REPO_URL, ChartComponent

log = logging.getLogger("kloudlib")


def address_pool_values(pools: Optional[List[AddressPool]]) -> Optional[list]:
    """
    MetalLB address-pools entries. avoid-buggy-ips is always on
    (skips .0 and .255 addresses). No pools -> None, chart default applies.
    """
    if not pools:
        return None

    return [
        {
            "name": pool.name,
            "protocol": pool.protocol,
            "addresses": list(pool.addresses),
            "avoid-buggy-ips": True,
        }
        for pool in pools
    ]


class MetalLBComponent(ChartComponent):
    def __init__(self, name: str, inputs: MetalLBInputs | None = None):
        inputs = inputs or MetalLBInputs()
        super().__init__(
            name=name,
            repo_name="stable",
            repo_url=STABLE_REPO_URL,
            chart="metallb",
            version=inputs.version or "0.12.0",
            namespace=inputs.namespace,
            release_name=f"{name}-metallb",
            provider=inputs.provider,
        )
        self.inputs = inputs

    def values(self) -> dict:
        pools = address_pool_values(self.inputs.address_pools)
        log.debug(f"[metallb] {self.name}: {len(pools or [])} address pool(s)")

        return {
            "configInline": {
                "address-pools": pools,
            },
            "prometheus": {
                "scrapeAnnotations": True,
            },
        }

# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

"""
Helm chart components (MetalLB, Grafana, ingress-nginx) rendered from
typed inputs and installed through the helm CLI.
"""

__version__ = "0.1.0"

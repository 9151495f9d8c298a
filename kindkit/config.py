"""Cluster configuration: types, defaulting and validation."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kindkit.errors import KindError, errorf, new, new_aggregate, wrapf

DEFAULT_CLUSTER_NAME = "kind"
"""The cluster name used when none is given."""

DEFAULT_IMAGE = "kindest/node:latest"
"""The node image used when none is given."""


class _StrEnum(str, Enum):
    def __str__(self) -> str:
        return self.value


class NodeRole(_StrEnum):
    """The role of a node in the cluster."""

    CONTROL_PLANE = "control-plane"
    WORKER = "worker"


class ClusterIPFamily(_StrEnum):
    """The IP family of the cluster network."""

    IPV4 = "ipv4"
    IPV6 = "ipv6"


class ProxyMode(_StrEnum):
    """The mode kube-proxy runs in."""

    IPTABLES = "iptables"
    IPVS = "ipvs"
    NONE = "none"


class MountPropagation(_StrEnum):
    """How mounts propagate between host and container."""

    NONE = "None"
    HOST_TO_CONTAINER = "HostToContainer"
    BIDIRECTIONAL = "Bidirectional"


class PortMappingProtocol(_StrEnum):
    """The protocol of a port mapping."""

    TCP = "TCP"
    UDP = "UDP"
    SCTP = "SCTP"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class PatchJSON6902:
    """An inline JSON 6902 patch and the resource it targets."""

    group: str = ""
    version: str = ""
    kind: str = ""
    patch: str = ""


@dataclass
class Mount:
    """A host path mounted into a node container."""

    container_path: str = ""
    host_path: str = ""
    readonly: bool = False
    selinux_relabel: bool = False
    propagation: MountPropagation | str = ""


@dataclass
class PortMapping:
    """A host port mapped to a node container port."""

    container_port: int = 0
    host_port: int = 0
    listen_address: str = ""
    protocol: PortMappingProtocol | str = ""


@dataclass
class Networking:
    """Cluster wide network settings."""

    ip_family: ClusterIPFamily | str = ""
    api_server_port: int = 0
    api_server_address: str = ""
    pod_subnet: str = ""
    service_subnet: str = ""
    disable_default_cni: bool = False
    kube_proxy_mode: ProxyMode | str = ""


_VALID_NAME_RE = re.compile(r"^[a-z0-9_.-]+$")


def validate_port(port: int) -> None:
    """Raise if ``port`` is not -1 (backend picks) or within 0..65535."""
    if port < -1 or port > 65535:
        raise errorf("invalid port number: %d", port)


def _parse_cidr(value: str) -> None:
    address, sep, prefix = value.partition("/")
    if not sep or not prefix.isdigit() or not address:
        raise new(f"invalid CIDR address: {value}")
    try:
        ipaddress.ip_network(f"{address}/{int(prefix)}", strict=False)
    except ValueError:
        raise new(f"invalid CIDR address: {value}") from None


@dataclass
class Node:
    """One node of the cluster, provisioned as a container."""

    role: NodeRole | str = ""
    image: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    extra_mounts: list[Mount] = field(default_factory=list)
    extra_port_mappings: list[PortMapping] = field(default_factory=list)
    kubeadm_config_patches: list[str] = field(default_factory=list)
    kubeadm_config_patches_json6902: list[PatchJSON6902] = field(default_factory=list)

    def validate(self) -> None:
        """Raise an error listing every problem with the node."""
        errs: list[BaseException] = []
        if self.role not in (NodeRole.CONTROL_PLANE, NodeRole.WORKER):
            errs.append(errorf("%q is not a valid node role", _text(self.role)))
        if not self.image:
            errs.append(new("image is a required field"))
        for mapping in self.extra_port_mappings:
            try:
                validate_port(mapping.host_port)
            except KindError as err:
                errs.append(wrapf(err, "invalid hostPort"))
            try:
                validate_port(mapping.container_port)
            except KindError as err:
                errs.append(wrapf(err, "invalid containerPort"))
        if errs:
            raise new_aggregate(errs)


@dataclass
class Cluster:
    """The processed configuration of a cluster."""

    name: str = ""
    nodes: list[Node] = field(default_factory=list)
    networking: Networking = field(default_factory=Networking)
    feature_gates: dict[str, bool] = field(default_factory=dict)
    runtime_config: dict[str, str] = field(default_factory=dict)
    kubeadm_config_patches: list[str] = field(default_factory=list)
    kubeadm_config_patches_json6902: list[PatchJSON6902] = field(default_factory=list)
    containerd_config_patches: list[str] = field(default_factory=list)
    containerd_config_patches_json6902: list[str] = field(default_factory=list)

    def validate(self) -> None:
        """Raise an error listing every problem with the configuration."""
        errs: list[BaseException] = []
        if not _VALID_NAME_RE.fullmatch(self.name):
            errs.append(
                errorf(
                    "'%s' is not a valid cluster name, cluster names must match `%s`",
                    self.name,
                    _VALID_NAME_RE.pattern,
                )
            )

        net = self.networking
        if net.api_server_port != 0:
            try:
                validate_port(net.api_server_port)
            except KindError as err:
                errs.append(wrapf(err, "invalid apiServerPort"))

        for label, subnet in (("podSubnet", net.pod_subnet), ("serviceSubnet", net.service_subnet)):
            try:
                _parse_cidr(subnet)
            except KindError as err:
                errs.append(wrapf(err, f"invalid {label}"))

        if net.kube_proxy_mode not in (ProxyMode.IPTABLES, ProxyMode.IPVS, ProxyMode.NONE):
            errs.append(errorf("invalid kubeProxyMode: %s", _text(net.kube_proxy_mode)))

        control_planes = 0
        for index, node in enumerate(self.nodes):
            try:
                node.validate()
            except KindError as err:
                errs.append(errorf("invalid configuration for node %d: %v", index, err))
            if node.role == NodeRole.CONTROL_PLANE:
                control_planes += 1
        if control_planes < 1:
            errs.append(errorf("must have at least one %s node", NodeRole.CONTROL_PLANE.value))

        if errs:
            raise new_aggregate(errs)


def set_defaults_node(obj: Node) -> None:
    """Fill in the node's unset fields."""
    if not obj.image:
        obj.image = DEFAULT_IMAGE
    if not obj.role:
        obj.role = NodeRole.CONTROL_PLANE


def set_defaults_cluster(obj: Cluster) -> None:
    """Fill in the cluster's unset fields, including its nodes."""
    if not obj.name:
        obj.name = DEFAULT_CLUSTER_NAME
    if not obj.nodes:
        obj.nodes = [Node(role=NodeRole.CONTROL_PLANE, image=DEFAULT_IMAGE)]
    for node in obj.nodes:
        set_defaults_node(node)

    net = obj.networking
    if not net.ip_family:
        net.ip_family = ClusterIPFamily.IPV4
    ipv6 = net.ip_family == ClusterIPFamily.IPV6
    if not net.api_server_address:
        net.api_server_address = "::1" if ipv6 else "127.0.0.1"
    if not net.pod_subnet:
        net.pod_subnet = "fd00:10:244::/56" if ipv6 else "10.244.0.0/16"
    if not net.service_subnet:
        net.service_subnet = "fd00:10:96::/112" if ipv6 else "10.96.0.0/16"
    if not net.kube_proxy_mode:
        net.kube_proxy_mode = ProxyMode.IPTABLES
"""Enumerations for flow-analytics graph queries."""

from enum import Enum


class Dimension(str, Enum):
    """Flow dimensions the backend can group by."""

    EXPORTER_ADDRESS = "ExporterAddress"
    EXPORTER_NAME = "ExporterName"
    EXPORTER_GROUP = "ExporterGroup"
    EXPORTER_ROLE = "ExporterRole"
    EXPORTER_SITE = "ExporterSite"
    EXPORTER_REGION = "ExporterRegion"
    EXPORTER_TENANT = "ExporterTenant"
    SRC_ADDR = "SrcAddr"
    DST_ADDR = "DstAddr"
    SRC_NET_PREFIX = "SrcNetPrefix"
    DST_NET_PREFIX = "DstNetPrefix"
    SRC_AS = "SrcAS"
    DST_AS = "DstAS"
    SRC_NET_NAME = "SrcNetName"
    DST_NET_NAME = "DstNetName"
    SRC_NET_ROLE = "SrcNetRole"
    DST_NET_ROLE = "DstNetRole"
    SRC_NET_SITE = "SrcNetSite"
    DST_NET_SITE = "DstNetSite"
    SRC_NET_REGION = "SrcNetRegion"
    DST_NET_REGION = "DstNetRegion"
    SRC_NET_TENANT = "SrcNetTenant"
    DST_NET_TENANT = "DstNetTenant"
    SRC_COUNTRY = "SrcCountry"
    DST_COUNTRY = "DstCountry"
    SRC_GEO_CITY = "SrcGeoCity"
    DST_GEO_CITY = "DstGeoCity"
    SRC_GEO_STATE = "SrcGeoState"
    DST_GEO_STATE = "DstGeoState"
    DST_AS_PATH = "DstASPath"
    DST_1ST_AS = "Dst1stAS"
    DST_2ND_AS = "Dst2ndAS"
    DST_3RD_AS = "Dst3rdAS"
    DST_COMMUNITIES = "DstCommunities"
    IN_IF_NAME = "InIfName"
    OUT_IF_NAME = "OutIfName"
    IN_IF_DESCRIPTION = "InIfDescription"
    OUT_IF_DESCRIPTION = "OutIfDescription"
    IN_IF_SPEED = "InIfSpeed"
    OUT_IF_SPEED = "OutIfSpeed"
    IN_IF_CONNECTIVITY = "InIfConnectivity"
    OUT_IF_CONNECTIVITY = "OutIfConnectivity"
    IN_IF_PROVIDER = "InIfProvider"
    OUT_IF_PROVIDER = "OutIfProvider"
    IN_IF_BOUNDARY = "InIfBoundary"
    OUT_IF_BOUNDARY = "OutIfBoundary"
    ETYPE = "EType"
    PROTO = "Proto"
    SRC_PORT = "SrcPort"
    DST_PORT = "DstPort"
    PACKET_SIZE_BUCKET = "PacketSizeBucket"
    FORWARDING_STATUS = "ForwardingStatus"
    TCP_FLAGS = "TCPFlags"

    @classmethod
    def from_name(cls, name: str) -> "Dimension":
        """Look up a dimension by its wire value, e.g. ``"SrcAS"``.

        Raises:
            ValueError: If the name is not a known dimension.
        """
        return cls(name.strip())


class Units(str, Enum):
    """Metric units for graph queries."""

    L2_BPS = "l2bps"
    L3_BPS = "l3bps"
    PPS = "pps"


class LimitType(str, Enum):
    """Top-N ranking statistic."""

    AVG = "avg"
    MAX = "max"
    SUM = "sum"
    P95 = "p95"

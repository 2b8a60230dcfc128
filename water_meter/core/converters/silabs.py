from zigpy.zcl.foundation import DataType, DataTypeId

from ..const import CLUSTERS
from .base import EncodedWrite, ReadRequest


def get_cluster_id(cluster: str | int) -> int:
    if isinstance(cluster, int):
        return cluster
    return int(CLUSTERS[cluster].cluster_id)


def attr_encode(type_id: int, value: int) -> bytes:
    cls = DataType.from_type_id(DataTypeId(type_id)).python_type
    return cls(value).serialize()


# zcl global read [cluster:2] [attributeId:2]
def zcl_read(nwk: str, ep: int, cluster_id: int, attr_id: int) -> list:
    """Generate Silabs Z3 read attribute command."""
    cli = f"zcl global read {cluster_id} {attr_id}"
    return [{"commandcli": cli}, {"commandcli": f"send {nwk} 1 {ep}"}]


# zcl global write [cluster:2] [attributeId:2] [type:4] [data:-1]
def zcl_write(
    nwk: str, ep: int, cluster_id: int, attr_id: int, value: int, *, type_id: int
) -> list:
    """Generate Silabs Z3 write attribute command."""
    data = attr_encode(type_id, value).hex()
    cli = f"zcl global write {cluster_id} {attr_id} {type_id} {{{data}}}"
    return [{"commandcli": cli}, {"commandcli": f"send {nwk} 1 {ep}"}]


def optimize_read(commands: list[dict]) -> bool:
    """Collect reads of one cluster on one endpoint to one zigbee message."""
    read: dict[tuple, list] = {}
    cluster_id = attr_id = None

    for item in commands:
        words = item["commandcli"].split(" ")
        if words[:3] == ["zcl", "global", "read"]:
            cluster_id, attr_id = words[3], words[4]
        elif words[0] == "send" and cluster_id:
            read.setdefault((item["commandcli"], cluster_id), []).append(attr_id)
            cluster_id = attr_id = None
        else:
            return False

    if len(read) == len(commands) // 2:
        return False

    commands.clear()

    for (send, cluster_id), attrs in read.items():
        if len(attrs) > 1:
            # ZCL frame: frame control, seq, read attributes command, attr IDs
            raw = "".join(int(a).to_bytes(2, "little").hex() for a in attrs)
            commands.append({"commandcli": f"raw {cluster_id} {{100000{raw}}}"})
        else:
            commands.append({"commandcli": f"zcl global read {cluster_id} {attrs[0]}"})
        commands.append({"commandcli": send})

    return True


def encode_commands(nwk: str, requests: list[EncodedWrite | ReadRequest]) -> list:
    """Render codec output to Silabs Z3 commands. Reads are merged when possible."""
    writes = []
    reads = []

    for req in requests:
        cluster_id = get_cluster_id(req.cluster)
        if isinstance(req, EncodedWrite):
            ep = req.ep or 1
            writes += zcl_write(
                nwk, ep, cluster_id, req.attr_id, req.value, type_id=req.type_id
            )
        else:
            reads += zcl_read(nwk, req.ep or 1, cluster_id, req.attr_id)

    optimize_read(reads)

    return writes + reads

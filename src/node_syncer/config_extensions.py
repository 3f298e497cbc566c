"""oslo.config options for the node update processor.

Services that already load their settings through oslo.config register these
options and build a :class:`~node_translator.config.ProcessorConfig` from them
instead of going through the standalone agent's YAML file.
"""

from oslo_config import cfg

from node_translator.config import ProcessorConfig

GROUP_NAME = 'node_syncer'

syncer_group = cfg.OptGroup(
    name=GROUP_NAME,
    title='Node update processor options')

syncer_opts = [
    cfg.BoolOpt('use_pod_cidr',
                default=True,
                help='Publish address block records derived from the pod '
                     'CIDRs assigned to each node.'),
    cfg.BoolOpt('prune_cidrs_on_delete',
                default=False,
                help='Forget the tracked pod CIDRs of a node once its '
                     'deletion has been processed.'),
    cfg.BoolOpt('emit_ipv6_address',
                default=False,
                help='Also publish the resolved IPv6 primary address of '
                     'each node.'),
]


def register_syncer_opts(conf=None):
    """Register the processor options on ``conf`` (``cfg.CONF`` by default)."""
    conf = conf if conf is not None else cfg.CONF
    conf.register_group(syncer_group)
    conf.register_opts(syncer_opts, group=syncer_group)
    return conf


def processor_config_from_conf(conf=None):
    """Build a ProcessorConfig from registered oslo.config options."""
    conf = conf if conf is not None else cfg.CONF
    group = getattr(conf, GROUP_NAME)
    return ProcessorConfig(
        use_pod_cidr=group.use_pod_cidr,
        prune_cidrs_on_delete=group.prune_cidrs_on_delete,
        emit_ipv6_address=group.emit_ipv6_address,
    )

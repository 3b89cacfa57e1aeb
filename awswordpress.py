import inspect
import json
from typing import Any, Dict, Iterable, List, Optional, Set

import pulumi
import pulumi_aws as aws
import pulumi_random as random

from config import WordpressConfig, props_from_dict, resolve_config

AWS_REGION_ABBREVIATIONS = {
    "us-east-1": "use1",
    "us-east-2": "use2",
    "us-west-1": "usw1",
    "us-west-2": "usw2",
    "af-south-1": "afs1",
    "ap-east-1": "ape1",
    "ap-south-1": "aps1",
    "ap-northeast-1": "apne1",
    "ap-northeast-2": "apne2",
    "ap-northeast-3": "apne3",
    "ap-southeast-1": "apse1",
    "ap-southeast-2": "apse2",
    "ca-central-1": "cac1",
    "eu-central-1": "euc1",
    "eu-west-1": "euw1",
    "eu-west-2": "euw2",
    "eu-west-3": "euw3",
    "eu-north-1": "eun1",
    "eu-south-1": "eus1",
    "me-south-1": "mes1",
    "sa-east-1": "sae1",
    "us-gov-east-1": "usge1",
    "us-gov-west-1": "usgw1",
    "cn-north-1": "cnn1",
    "cn-northwest-1": "cnnw1",
}

VPC_CIDR = "10.0.0.0/16"
IMAGE = "bitnami/wordpress:latest"
CONTAINER_NAME = "web"
CONTAINER_PORT = 8080
CONTAINER_PATH = "/bitnami/wordpress"
PASSWORD_LENGTH = 20
AURORA_ENGINE_VERSION = "8.0.mysql_aurora.3.05.2"
LOG_RETENTION_DAYS = 7

MYSQL_PORT = 3306
NFS_PORT = 2049
CACHE_PORTS = {"redis": 6379, "memcached": 11211}

# AWS managed CloudFront policies
CACHING_DISABLED_POLICY = "4135ea2d-6df8-44a3-9df3-4b5a84be39ad"
CACHING_OPTIMIZED_POLICY = "658327ea-f89d-4fab-a63d-7e88639e58f6"
ALL_VIEWER_REQUEST_POLICY = "216adef6-5c7f-47e4-b989-5492eafa07d3"
STATIC_PATHS = ["wp-content/*", "wp-includes/*"]

ALLOW_ALL_EGRESS = {
    "protocol": "-1",
    "from_port": 0,
    "to_port": 0,
    "cidr_blocks": ["0.0.0.0/0"],
}

def resolve_value(value: Any, resources: Dict[str, Any], refs: Optional[Set[str]] = None) -> Any:
    if isinstance(value, dict):
        return {k: resolve_value(v, resources, refs) for k, v in value.items()}
    elif isinstance(value, list):
        return [resolve_value(item, resources, refs) for item in value]
    elif isinstance(value, str) and value.startswith("ref:"):
        ref_text = value[4:]
        if "." in ref_text:
            ref_res, ref_attr = ref_text.split(".", 1)
        else:
            ref_res, ref_attr = ref_text, "id"
        if ref_res not in resources:
            raise ValueError(f"Referenced resource '{ref_res}' not found.")
        resource_obj = resources[ref_res]
        attr_val = getattr(resource_obj, ref_attr, None)
        if attr_val is None:
            raise ValueError(f"Attribute '{ref_attr}' not found on resource '{ref_res}'")
        if refs is not None:
            refs.add(ref_res)
        return attr_val
    else:
        return value

def accepts_parameter(resource_class: type, param: str) -> bool:
    """Check the generated <Resource>Args class for a keyword argument."""
    module = inspect.getmodule(resource_class)
    args_class = getattr(module, f"{resource_class.__name__}Args", None)
    if args_class is None:
        return False
    return param in inspect.signature(args_class.__init__).parameters

class WordpressResourceBuilder:
    def __init__(self, config_data: dict):
        self.config = config_data
        self.identifier: str = config_data["identifier"]
        self.region: str = config_data.get("region", "us-east-1")
        self.settings: WordpressConfig = resolve_config(props_from_dict(config_data.get("wordpress")))
        self.resources: Dict[str, Any] = {}
        self.dependencies: Dict[str, List[str]] = {}
        self.outputs: Dict[str, pulumi.Output] = {}
        self.availability_zones: List[str] = []

    def get_abbreviation(self, region: str) -> str:
        return AWS_REGION_ABBREVIATIONS.get(region.lower(), region.split("-")[0].lower())

    def generate_resource_name(self, base_name: str) -> str:
        ident = self.identifier.strip().lower()
        reg_abbr = self.get_abbreviation(self.region)
        return f"{ident}-{reg_abbr}-{base_name.replace('_', '-')}".lower()

    def output_name(self, base_name: str) -> str:
        return f"{base_name}-{self.identifier}"

    def resolve_args(self, args: dict, refs: Optional[Set[str]] = None) -> dict:
        return {key: resolve_value(value, self.resources, refs) for key, value in args.items()}

    def _apply_common_parameters(self, resolved_args: dict, resource_class: type, pulumi_name: str) -> dict:
        if accepts_parameter(resource_class, "tags"):
            resource_tags = {"Name": pulumi_name, "wordpress:instance": self.identifier}
            resource_tags.update(self.config.get("tags") or {})
            resolved_args.setdefault("tags", resource_tags)
        else:
            resolved_args.pop("tags", None)
        if accepts_parameter(resource_class, "region"):
            resolved_args.setdefault("region", self.region)
        else:
            resolved_args.pop("region", None)
        return resolved_args

    def declare(
        self,
        name: str,
        resource_class: type,
        args: Optional[dict] = None,
        depends_on: Iterable[str] = (),
        serialize: Iterable[str] = (),
    ):
        """
        Create a resource and register it under its logical name.

        'ref:' strings in args are resolved against already declared
        resources and recorded as dependency edges, as are the names in
        depends_on. Keys listed in serialize are JSON encoded once their
        references are resolved.
        """
        if name in self.resources:
            raise ValueError(f"Resource '{name}' is already declared.")
        depends_on = list(depends_on)
        for dep in depends_on:
            if dep not in self.resources:
                raise ValueError(f"Dependency '{dep}' of '{name}' is not declared.")
        refs: Set[str] = set()
        resolved_args = self.resolve_args(args or {}, refs)
        for key in serialize:
            resolved_args[key] = pulumi.Output.json_dumps(resolved_args[key])
        pulumi_name = self.generate_resource_name(name)
        resolved_args = self._apply_common_parameters(resolved_args, resource_class, pulumi_name)
        opts = None
        if depends_on:
            opts = pulumi.ResourceOptions(depends_on=[self.resources[dep] for dep in depends_on])
        pulumi.log.debug(f"Resolved args for '{name}': {sorted(resolved_args)}")
        resource_instance = resource_class(pulumi_name, opts=opts, **resolved_args)
        self.resources[name] = resource_instance
        self.dependencies[name] = sorted(refs.union(depends_on))
        pulumi.log.info(f"Created resource: {pulumi_name} ({resource_class.__module__}.{resource_class.__name__})")
        return resource_instance

    def ancestors(self, name: str) -> Set[str]:
        """All logical resources that must exist before 'name'."""
        seen: Set[str] = set()
        stack = list(self.dependencies.get(name, []))
        while stack:
            dep = stack.pop()
            if dep not in seen:
                seen.add(dep)
                stack.extend(self.dependencies.get(dep, []))
        return seen

    def _refs(self, prefix: str, count: int, attr: str = "id") -> List[str]:
        return [f"ref:{prefix}_{i}.{attr}" for i in range(count)]

    def build(self):
        self.build_network()
        self.build_secrets()
        self.build_database()
        self.build_filesystem()
        self.build_cache()
        self.build_compute()
        self.build_autoscaling()
        self.build_cdn()
        self.build_outputs()

    def _lookup_availability_zones(self) -> List[str]:
        params: Dict[str, Any] = {"state": "available"}
        if "region" in inspect.signature(aws.get_availability_zones).parameters:
            params["region"] = self.region
        zones = aws.get_availability_zones(**params)
        return list(zones.names)[: self.settings.maximum_availability_zones]

    def build_network(self):
        s = self.settings
        self.availability_zones = self._lookup_availability_zones()
        az_count = len(self.availability_zones)

        self.declare("vpc", aws.ec2.Vpc, {
            "cidr_block": VPC_CIDR,
            "enable_dns_hostnames": True,
            "enable_dns_support": True,
            "instance_tenancy": "default",
        })
        self.declare("internet_gateway", aws.ec2.InternetGateway, {"vpc_id": "ref:vpc.id"})
        self.declare("public_route_table", aws.ec2.RouteTable, {
            "vpc_id": "ref:vpc.id",
            "routes": [{"cidr_block": "0.0.0.0/0", "gateway_id": "ref:internet_gateway.id"}],
        })

        for i, zone in enumerate(self.availability_zones):
            self.declare(f"public_subnet_{i}", aws.ec2.Subnet, {
                "vpc_id": "ref:vpc.id",
                "cidr_block": f"10.0.{i}.0/24",
                "availability_zone": zone,
                "map_public_ip_on_launch": True,
            })
            self.declare(f"public_route_table_association_{i}", aws.ec2.RouteTableAssociation, {
                "subnet_id": f"ref:public_subnet_{i}.id",
                "route_table_id": "ref:public_route_table.id",
            })

        nat_count = min(s.nat_gateways, az_count)
        if nat_count < s.nat_gateways:
            pulumi.log.warn(f"Requested {s.nat_gateways} NAT gateways but only {az_count} availability zones; using {nat_count}.")
        for i in range(nat_count):
            self.declare(f"nat_eip_{i}", aws.ec2.Eip, {"domain": "vpc"})
            self.declare(f"nat_gateway_{i}", aws.ec2.NatGateway, {
                "allocation_id": f"ref:nat_eip_{i}.id",
                "subnet_id": f"ref:public_subnet_{i}.id",
            }, depends_on=["internet_gateway"])

        for i, zone in enumerate(self.availability_zones):
            self.declare(f"private_subnet_{i}", aws.ec2.Subnet, {
                "vpc_id": "ref:vpc.id",
                "cidr_block": f"10.0.{az_count + i}.0/24",
                "availability_zone": zone,
                "map_public_ip_on_launch": False,
            })
            routes = []
            if nat_count:
                routes.append({"cidr_block": "0.0.0.0/0", "nat_gateway_id": f"ref:nat_gateway_{i % nat_count}.id"})
            self.declare(f"private_route_table_{i}", aws.ec2.RouteTable, {"vpc_id": "ref:vpc.id", "routes": routes})
            self.declare(f"private_route_table_association_{i}", aws.ec2.RouteTableAssociation, {
                "subnet_id": f"ref:private_subnet_{i}.id",
                "route_table_id": f"ref:private_route_table_{i}.id",
            })

    def public_subnet_ids(self) -> List[str]:
        return self._refs("public_subnet", len(self.availability_zones))

    def private_subnet_ids(self) -> List[str]:
        return self._refs("private_subnet", len(self.availability_zones))

    def _security_group(self, name: str, description: str, ingress: Optional[list] = None):
        return self.declare(name, aws.ec2.SecurityGroup, {
            "vpc_id": "ref:vpc.id",
            "description": description,
            "ingress": ingress or [],
            "egress": [ALLOW_ALL_EGRESS],
        })

    def build_secrets(self):
        s = self.settings
        for key, username in (("db", s.database_username), ("app", s.username)):
            self.declare(f"{key}_password", random.RandomPassword, {
                "length": PASSWORD_LENGTH,
                "special": False,
            })
            self.declare(f"{key}_secret", aws.secretsmanager.Secret, {
                "name": f"password-of-{username}-{key}-{self.identifier}",
                "recovery_window_in_days": 0,
            })
            self.declare(f"{key}_secret_version", aws.secretsmanager.SecretVersion, {
                "secret_id": f"ref:{key}_secret.id",
                "secret_string": f"ref:{key}_password.result",
            })

    def build_database(self):
        s = self.settings
        self.declare("db_subnet_group", aws.rds.SubnetGroup, {"subnet_ids": self.private_subnet_ids()})
        self._security_group("db_security_group", f"WordPress database for {self.identifier}")
        self.declare("db_cluster", aws.rds.Cluster, {
            "engine": "aurora-mysql",
            "engine_version": AURORA_ENGINE_VERSION,
            "database_name": s.database_name,
            "master_username": s.database_username,
            "master_password": "ref:db_password.result",
            "db_subnet_group_name": "ref:db_subnet_group.name",
            "vpc_security_group_ids": ["ref:db_security_group.id"],
            "storage_encrypted": True,
            "copy_tags_to_snapshot": True,
            "skip_final_snapshot": True,
            "deletion_protection": False,
            "apply_immediately": True,
        })
        # writer and reader
        for role in ("writer", "reader"):
            self.declare(f"db_instance_{role}", aws.rds.ClusterInstance, {
                "cluster_identifier": "ref:db_cluster.id",
                "instance_class": s.db_instance_type,
                "engine": "aurora-mysql",
                "engine_version": AURORA_ENGINE_VERSION,
                "db_subnet_group_name": "ref:db_subnet_group.name",
                "publicly_accessible": False,
            })

    def build_filesystem(self):
        self._security_group("fs_security_group", f"WordPress shared filesystem for {self.identifier}")
        self.declare("filesystem", aws.efs.FileSystem, {
            "encrypted": True,
            "tags": {
                "Name": f"{self.settings.database_name}-{self.identifier}",
                "wordpress:instance": self.identifier,
                **(self.config.get("tags") or {}),
            },
        })
        for i in range(len(self.availability_zones)):
            self.declare(f"fs_mount_target_{i}", aws.efs.MountTarget, {
                "file_system_id": "ref:filesystem.id",
                "subnet_id": f"ref:private_subnet_{i}.id",
                "security_groups": ["ref:fs_security_group.id"],
            })

    def build_cache(self):
        cache = self.settings.cache
        if cache is None:
            return
        if cache.engine == "redis" and cache.number_of_nodes > 1:
            pulumi.log.warn(
                f"A redis cache cluster supports a single node; {cache.number_of_nodes} were requested "
                f"for '{self.identifier}'."
            )
        self.declare("cache_subnet_group", aws.elasticache.SubnetGroup, {
            "description": f"WordPress cache subnets for {self.identifier}",
            "subnet_ids": self.private_subnet_ids(),
        })
        self._security_group("cache_security_group", f"WordPress cache for {self.identifier}")
        self.declare("cache_cluster", aws.elasticache.Cluster, {
            "engine": cache.engine,
            "node_type": cache.node_type,
            "num_cache_nodes": cache.number_of_nodes,
            "port": CACHE_PORTS.get(cache.engine, CACHE_PORTS["redis"]),
            "subnet_group_name": "ref:cache_subnet_group.name",
            "security_group_ids": ["ref:cache_security_group.id"],
        })

    def health_check(self) -> dict:
        return {
            "enabled": True,
            "path": "/",
            "protocol": "HTTP",
            "matcher": "200-399",
        }

    def volume(self) -> dict:
        return {
            "name": f"WordpressVolume-{self.identifier}",
            "efs_volume_configuration": {
                "file_system_id": "ref:filesystem.id",
                "transit_encryption": "ENABLED",
            },
        }

    def container_definition(self) -> dict:
        s = self.settings
        environment = {
            "WORDPRESS_DATABASE_NAME": s.database_name,
            "WORDPRESS_DATABASE_USER": s.database_username,
            "WORDPRESS_DATABASE_HOST": "ref:db_cluster.endpoint",
            "WORDPRESS_TABLE_PREFIX": s.table_prefix,
            "WORDPRESS_USERNAME": s.username,
        }
        # passwords are injected by ECS from Secrets Manager, never inlined
        secrets = {
            "WORDPRESS_DATABASE_PASSWORD": "ref:db_secret.arn",
            "WORDPRESS_PASSWORD": "ref:app_secret.arn",
        }
        return {
            "name": CONTAINER_NAME,
            "image": IMAGE,
            "essential": True,
            "portMappings": [{"containerPort": CONTAINER_PORT, "protocol": "tcp"}],
            "environment": [{"name": k, "value": v} for k, v in environment.items()],
            "secrets": [{"name": k, "valueFrom": v} for k, v in secrets.items()],
            "mountPoints": [{
                "containerPath": CONTAINER_PATH,
                "readOnly": False,
                "sourceVolume": self.volume()["name"],
            }],
            "logConfiguration": {
                "logDriver": "awslogs",
                "options": {
                    "awslogs-group": "ref:log_group.name",
                    "awslogs-region": self.region,
                    "awslogs-stream-prefix": f"WordpressApp-{self.identifier}",
                },
            },
        }

    def grant_default_port_access(self):
        grants = [("db_access", "db_security_group", MYSQL_PORT), ("fs_access", "fs_security_group", NFS_PORT)]
        cache = self.settings.cache
        if cache is not None:
            grants.append(("cache_access", "cache_security_group", CACHE_PORTS.get(cache.engine, CACHE_PORTS["redis"])))
        for name, target_group, port in grants:
            self.declare(name, aws.ec2.SecurityGroupRule, {
                "type": "ingress",
                "protocol": "tcp",
                "from_port": port,
                "to_port": port,
                "security_group_id": f"ref:{target_group}.id",
                "source_security_group_id": "ref:service_security_group.id",
                "description": f"Allow {self.identifier} WordPress tasks",
            })
        return [name for name, _, _ in grants]

    def _task_roles(self):
        assume_role_policy = json.dumps({
            "Version": "2012-10-17",
            "Statement": [{
                "Action": "sts:AssumeRole",
                "Effect": "Allow",
                "Principal": {"Service": "ecs-tasks.amazonaws.com"},
            }],
        })
        self.declare("execution_role", aws.iam.Role, {"assume_role_policy": assume_role_policy})
        self.declare("execution_role_policy", aws.iam.RolePolicyAttachment, {
            "role": "ref:execution_role.name",
            "policy_arn": "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy",
        })
        self.declare("execution_secrets_policy", aws.iam.RolePolicy, {
            "role": "ref:execution_role.id",
            "policy": {
                "Version": "2012-10-17",
                "Statement": [{
                    "Action": ["secretsmanager:GetSecretValue"],
                    "Effect": "Allow",
                    "Resource": ["ref:db_secret.arn", "ref:app_secret.arn"],
                }],
            },
        }, serialize=["policy"])
        self.declare("task_role", aws.iam.Role, {"assume_role_policy": assume_role_policy})

    def build_compute(self):
        s = self.settings
        self.declare("ecs_cluster", aws.ecs.Cluster, {})
        self.declare("log_group", aws.cloudwatch.LogGroup, {"retention_in_days": LOG_RETENTION_DAYS})
        self._task_roles()

        lb_ingress = [{"protocol": "tcp", "from_port": 80, "to_port": 80, "cidr_blocks": ["0.0.0.0/0"]}]
        if s.certificate_arn:
            lb_ingress.append({"protocol": "tcp", "from_port": 443, "to_port": 443, "cidr_blocks": ["0.0.0.0/0"]})
        self._security_group("lb_security_group", f"WordPress load balancer for {self.identifier}", lb_ingress)
        self._security_group("service_security_group", f"WordPress tasks for {self.identifier}", [
            {"protocol": "tcp", "from_port": CONTAINER_PORT, "to_port": CONTAINER_PORT,
             "security_groups": ["ref:lb_security_group.id"]},
        ])
        access_rules = self.grant_default_port_access()

        self.declare("task_definition", aws.ecs.TaskDefinition, {
            "family": f"WordpressApp-{self.identifier}",
            "cpu": str(s.task_cpu),
            "memory": str(s.task_memory),
            "network_mode": "awsvpc",
            "requires_compatibilities": ["FARGATE"],
            "execution_role_arn": "ref:execution_role.arn",
            "task_role_arn": "ref:task_role.arn",
            "volumes": [self.volume()],
            "container_definitions": [self.container_definition()],
        }, serialize=["container_definitions"])

        self.declare("load_balancer", aws.lb.LoadBalancer, {
            "internal": False,
            "load_balancer_type": "application",
            "security_groups": ["ref:lb_security_group.id"],
            "subnets": self.public_subnet_ids(),
            "enable_deletion_protection": False,
        })
        self.declare("target_group", aws.lb.TargetGroup, {
            "port": CONTAINER_PORT,
            "protocol": "HTTP",
            "target_type": "ip",
            "vpc_id": "ref:vpc.id",
            "health_check": self.health_check(),
        })
        self.declare("http_listener", aws.lb.Listener, {
            "load_balancer_arn": "ref:load_balancer.arn",
            "port": 80,
            "protocol": "HTTP",
            "default_actions": [{"type": "forward", "target_group_arn": "ref:target_group.arn"}],
        })
        listeners = ["http_listener"]
        if s.certificate_arn:
            self.declare("https_listener", aws.lb.Listener, {
                "load_balancer_arn": "ref:load_balancer.arn",
                "port": 443,
                "protocol": "HTTPS",
                "ssl_policy": "ELBSecurityPolicy-TLS13-1-2-2021-06",
                "certificate_arn": s.certificate_arn,
                "default_actions": [{"type": "forward", "target_group_arn": "ref:target_group.arn"}],
            })
            listeners.append("https_listener")

        mount_targets = [f"fs_mount_target_{i}" for i in range(len(self.availability_zones))]
        self.declare("ecs_service", aws.ecs.Service, {
            "cluster": "ref:ecs_cluster.arn",
            "task_definition": "ref:task_definition.arn",
            "desired_count": s.desired_task_instance_count,
            "launch_type": "FARGATE",
            "health_check_grace_period_seconds": 300,
            "network_configuration": {
                "subnets": self.private_subnet_ids(),
                "security_groups": ["ref:service_security_group.id"],
                "assign_public_ip": False,
            },
            "load_balancers": [{
                "target_group_arn": "ref:target_group.arn",
                "container_name": CONTAINER_NAME,
                "container_port": CONTAINER_PORT,
            }],
        }, depends_on=[
            *listeners,
            "db_instance_writer",
            "db_secret_version",
            "app_secret_version",
            *mount_targets,
            *access_rules,
        ])

    def build_autoscaling(self):
        s = self.settings
        if not (s.min_capacity or s.max_capacity):
            return
        cluster = self.resources["ecs_cluster"]
        service = self.resources["ecs_service"]
        self.declare("scaling_target", aws.appautoscaling.Target, {
            "min_capacity": s.min_capacity,
            "max_capacity": s.max_capacity,
            "resource_id": pulumi.Output.concat("service/", cluster.name, "/", service.name),
            "scalable_dimension": "ecs:service:DesiredCount",
            "service_namespace": "ecs",
        }, depends_on=["ecs_cluster", "ecs_service"])

        if s.scale_only_above_desired and s.max_capacity <= s.desired_task_instance_count:
            pulumi.log.info(
                f"Skipping scaling policies for '{self.identifier}': max capacity {s.max_capacity} "
                f"does not exceed desired count {s.desired_task_instance_count}."
            )
            return
        policies = (
            ("cpu_scaling_policy", s.cpu_threshold, "ECSServiceAverageCPUUtilization"),
            ("memory_scaling_policy", s.memory_threshold, "ECSServiceAverageMemoryUtilization"),
        )
        for name, threshold, metric in policies:
            if threshold <= 0:
                continue
            self.declare(name, aws.appautoscaling.Policy, {
                "policy_type": "TargetTrackingScaling",
                "resource_id": "ref:scaling_target.resource_id",
                "scalable_dimension": "ref:scaling_target.scalable_dimension",
                "service_namespace": "ref:scaling_target.service_namespace",
                "target_tracking_scaling_policy_configuration": {
                    "target_value": threshold,
                    "predefined_metric_specification": {"predefined_metric_type": metric},
                },
            })

    def origin_hostname(self) -> Optional[str]:
        """Name the load balancer certificate covers, or None when HTTPS is unavailable."""
        s = self.settings
        if not s.certificate_arn:
            return None
        if s.origin_domain_name:
            return s.origin_domain_name
        if s.domain_name:
            return f"origin.{s.domain_name}"
        return None

    def build_cdn(self):
        s = self.settings
        if not s.cdn:
            return
        origin_id = f"WordpressOrigin-{self.identifier}"
        behavior = {
            "target_origin_id": origin_id,
            "viewer_protocol_policy": "https-only",
            "allowed_methods": ["GET", "HEAD", "OPTIONS", "PUT", "POST", "PATCH", "DELETE"],
            "cached_methods": ["GET", "HEAD"],
            "compress": True,
        }
        viewer_certificate: Dict[str, Any] = {"cloudfront_default_certificate": True}
        aliases: List[str] = []
        if s.domain_name and s.certificate_arn:
            aliases = [s.domain_name]
            viewer_certificate = {
                "acm_certificate_arn": s.certificate_arn,
                "ssl_support_method": "sni-only",
                "minimum_protocol_version": "TLSv1.2_2021",
            }
        elif s.domain_name:
            pulumi.log.warn(f"No certificate_arn for '{s.domain_name}'; the distribution keeps its default domain.")

        origin_host = self.origin_hostname()
        depends_on: List[str] = []
        if origin_host:
            origin_domain = origin_host
            depends_on = ["load_balancer", "https_listener"]
            origin_policy = "https-only"
            pulumi.log.info(
                f"CloudFront reaches '{self.identifier}' over HTTPS at '{origin_host}'; "
                f"point that name at the load balancer."
            )
        else:
            origin_domain = "ref:load_balancer.dns_name"
            origin_policy = "http-only"
            pulumi.log.warn(
                f"No certificate_arn and origin hostname for '{self.identifier}'; "
                f"CloudFront reaches the load balancer over plain HTTP."
            )

        self.declare("distribution", aws.cloudfront.Distribution, {
            "enabled": True,
            "comment": f"WordPress {self.identifier}",
            "price_class": "PriceClass_100",
            "aliases": aliases,
            "origins": [{
                "origin_id": origin_id,
                "domain_name": origin_domain,
                "custom_origin_config": {
                    "http_port": 80,
                    "https_port": 443,
                    "origin_protocol_policy": origin_policy,
                    "origin_ssl_protocols": ["TLSv1.2"],
                },
            }],
            "default_cache_behavior": {
                **behavior,
                "cache_policy_id": CACHING_DISABLED_POLICY,
                "origin_request_policy_id": ALL_VIEWER_REQUEST_POLICY,
            },
            "ordered_cache_behaviors": [
                {**behavior, "path_pattern": path, "allowed_methods": ["GET", "HEAD"],
                 "cache_policy_id": CACHING_OPTIMIZED_POLICY}
                for path in STATIC_PATHS
            ],
            "restrictions": {"geo_restriction": {"restriction_type": "none"}},
            "viewer_certificate": viewer_certificate,
        }, depends_on=depends_on)

    def build_outputs(self):
        self.outputs[self.output_name("WordpressDBHost")] = self.resources["db_cluster"].endpoint
        self.outputs[self.output_name("WordpressPassword")] = pulumi.Output.secret(
            self.resources["app_password"].result
        )
        if "cache_cluster" in self.resources:
            cluster = self.resources["cache_cluster"]
            self.outputs[self.output_name("WordpressCacheHost")] = cluster.cache_nodes.apply(
                lambda nodes: nodes[0].address if nodes else None
            )
            self.outputs[self.output_name("WordpressCachePort")] = cluster.port
        if "distribution" in self.resources:
            self.outputs[self.output_name("WordpressDistributionDomain")] = self.resources["distribution"].domain_name
            if self.origin_hostname():
                # DNS target for the origin hostname
                self.outputs[self.output_name("WordpressOriginTarget")] = self.resources["load_balancer"].dns_name

"""Shared pytest fixtures for the WordPress stack tests."""

from typing import Any, Dict

import pulumi
import pytest

AVAILABILITY_ZONES = ["us-east-1a", "us-east-1b", "us-east-1c"]


class WordpressMocks(pulumi.runtime.Mocks):
    """Echo inputs back as outputs and fill in the attributes the builder reads."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs: Dict[str, Any] = {
            "name": args.name,
            "arn": f"arn:aws:mock:::{args.name}",
            **args.inputs,
        }
        if args.typ == "aws:rds/cluster:Cluster":
            outputs["endpoint"] = f"{args.name}.cluster-mock.us-east-1.rds.amazonaws.com"
        elif args.typ == "aws:elasticache/cluster:Cluster":
            outputs["cacheNodes"] = [{
                "id": "0001",
                "address": f"{args.name}.mock.cache.amazonaws.com",
                "port": args.inputs.get("port", 6379),
                "availabilityZone": AVAILABILITY_ZONES[0],
            }]
        elif args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = f"{args.name}.us-east-1.elb.amazonaws.com"
        elif args.typ == "aws:cloudfront/distribution:Distribution":
            outputs["domainName"] = "d111111abcdef8.cloudfront.net"
        elif args.typ == "random:index/randomPassword:RandomPassword":
            outputs["result"] = "p" * int(args.inputs.get("length", 20))
        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:index/getAvailabilityZones:getAvailabilityZones":
            return {"id": "us-east-1", "names": AVAILABILITY_ZONES}
        return {}


@pytest.fixture(autouse=True)
def pulumi_mocks():
    """Route every resource registration to WordpressMocks."""
    pulumi.runtime.set_mocks(WordpressMocks(), project="wordpress-aws", stack="test", preview=False)
    yield


@pytest.fixture
def make_builder():
    """Build a stack for the given 'wordpress' mapping and return the builder."""
    from awswordpress import WordpressResourceBuilder

    def _make(identifier: str = "MyWP", region: str = "us-east-1", **wordpress):
        builder = WordpressResourceBuilder({
            "identifier": identifier,
            "region": region,
            "tags": {"team": "web"},
            "wordpress": wordpress,
        })
        builder.build()
        return builder

    return _make

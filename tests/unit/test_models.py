"""Unit tests for the consolidation data model."""

from elbpruner.models import (
    ConsolidatedLoadBalancer,
    ExistingLoadBalancer,
    IngressPermission,
    Listener,
    Recommendation,
    SecurityGroup,
    TargetType,
)


class TestTargetType:
    """Tests for replacement type properties."""

    def test_only_albs_allow_port_collisions(self):
        assert TargetType.ALB.allows_port_collisions
        assert not TargetType.NLB.allows_port_collisions
        assert not TargetType.ELB.allows_port_collisions


class TestExistingLoadBalancer:
    """Tests for parsing describe-load-balancers entries."""

    def test_from_dict(self):
        lb = ExistingLoadBalancer.from_dict(
            {
                "LoadBalancerName": "web",
                "Subnets": ["subnet-1", "subnet-2"],
                "ListenerDescriptions": [
                    {"Listener": {"LoadBalancerPort": 443, "Protocol": "HTTPS",
                                  "InstancePort": 8080}, "PolicyNames": []},
                ],
                "SecurityGroups": ["sg-1"],
                "DNSName": "web-123.elb.amazonaws.com",
            }
        )

        assert lb.name == "web"
        assert lb.subnets == ["subnet-1", "subnet-2"]
        assert lb.listeners == [Listener(port=443, protocol="HTTPS")]
        assert lb.security_groups == ["sg-1"]
        assert lb.ports == [443]

    def test_from_dict_without_optional_lists(self):
        lb = ExistingLoadBalancer.from_dict({"LoadBalancerName": "bare", "Subnets": ["s"]})

        assert lb.listeners == []
        assert lb.security_groups == []

    def test_to_dict_can_be_parsed_again(self):
        lb = ExistingLoadBalancer(
            name="web",
            subnets=["a"],
            listeners=[Listener(port=80, protocol="HTTP")],
            security_groups=["sg-1"],
        )

        assert ExistingLoadBalancer.from_dict(lb.to_dict()) == lb


class TestSecurityGroup:
    """Tests for parsing describe-security-groups entries."""

    def test_from_dict_collects_ipv4_and_ipv6_ranges(self):
        group = SecurityGroup.from_dict(
            {
                "GroupId": "sg-1",
                "GroupName": "web",
                "IpPermissions": [
                    {
                        "IpProtocol": "tcp",
                        "FromPort": 443,
                        "ToPort": 443,
                        "IpRanges": [{"CidrIp": "0.0.0.0/0", "Description": "world"}],
                        "Ipv6Ranges": [{"CidrIpv6": "::/0"}],
                        "UserIdGroupPairs": [{"GroupId": "sg-2"}],
                    }
                ],
            }
        )

        assert group.group_id == "sg-1"
        assert group.ingress == [
            IngressPermission(
                source_ranges=["0.0.0.0/0", "::/0"], protocol="tcp", from_port=443, to_port=443
            )
        ]

    def test_permission_to_dict_splits_address_families(self):
        permission = IngressPermission(source_ranges=["10.0.0.0/8", "fd00::/8"], protocol="-1")

        assert permission.to_dict() == {
            "IpRanges": [{"CidrIp": "10.0.0.0/8"}],
            "Ipv6Ranges": [{"CidrIpv6": "fd00::/8"}],
            "IpProtocol": "-1",
        }


class TestConsolidatedLoadBalancer:
    """Tests for proposed replacement bookkeeping."""

    def test_seeded_with_copies_ports_and_groups(self):
        lb = ExistingLoadBalancer(
            name="first",
            subnets=["a"],
            listeners=[Listener(443, "HTTPS"), Listener(80, "HTTP")],
            security_groups=["sg-2", "sg-1"],
        )

        clb = ConsolidatedLoadBalancer.seeded_with(TargetType.ALB, lb)

        assert clb.load_balancers == ["first"]
        assert clb.ports == ["80", "443"]
        assert clb.security_groups == ["sg-1", "sg-2"]

    def test_ports_sort_numerically(self):
        clb = ConsolidatedLoadBalancer(target_type=TargetType.NLB, port_set={11210, 443, 80})

        assert clb.ports == ["80", "443", "11210"]

    def test_replace_appends_in_merge_order(self):
        clb = ConsolidatedLoadBalancer(target_type=TargetType.ALB)
        for name in ["b", "a"]:
            clb.replace(ExistingLoadBalancer(name=name, subnets=["s"], listeners=[Listener(80, "HTTP")]))

        assert clb.load_balancers == ["b", "a"]
        assert clb.ports == ["80"]

    def test_port_collision(self):
        clb = ConsolidatedLoadBalancer(target_type=TargetType.NLB, port_set={9000})

        colliding = ExistingLoadBalancer("x", ["s"], [Listener(9000, "TCP"), Listener(9001, "TCP")])
        separate = ExistingLoadBalancer("y", ["s"], [Listener(9002, "TCP")])

        assert clb.has_port_collision(colliding)
        assert not clb.has_port_collision(separate)

    def test_is_retained_only_for_single_classic(self):
        single = ConsolidatedLoadBalancer(target_type=TargetType.ELB, load_balancers=["x"])
        merged = ConsolidatedLoadBalancer(target_type=TargetType.ELB, load_balancers=["x", "y"])
        alb = ConsolidatedLoadBalancer(target_type=TargetType.ALB, load_balancers=["x"])

        assert single.is_retained
        assert not merged.is_retained
        assert not alb.is_retained


class TestRecommendation:
    """Tests for per-tier proposal bookkeeping."""

    def test_lists_and_indexes_are_independent_per_type(self):
        recommendation = Recommendation()

        assert recommendation.clbs_for(TargetType.ALB) is recommendation.albs
        assert recommendation.clbs_for(TargetType.NLB) is recommendation.nlbs
        assert recommendation.clbs_for(TargetType.ELB) is recommendation.elbs
        assert recommendation.sg_index_for(TargetType.NLB) is recommendation.nlbs_by_sg

    def test_associate_overwrites_previous_owner(self):
        recommendation = Recommendation()
        older = ConsolidatedLoadBalancer(target_type=TargetType.NLB, load_balancers=["old"])
        newer = ConsolidatedLoadBalancer(target_type=TargetType.NLB, load_balancers=["new"])

        recommendation.associate(older, ["sg-1", "sg-2"])
        recommendation.associate(newer, ["sg-1"])

        assert recommendation.nlbs_by_sg == {"sg-1": newer, "sg-2": older}
        assert recommendation.albs_by_sg == {}

    def test_to_dict(self):
        alb = ConsolidatedLoadBalancer(
            target_type=TargetType.ALB,
            load_balancers=["first", "second"],
            port_set={443, 80},
            security_group_set={"sg-1"},
        )
        recommendation = Recommendation(subnets=["a"], albs=[alb])

        assert recommendation.to_dict() == {
            "subnets": ["a"],
            "albs": [
                {
                    "load_balancers": ["first", "second"],
                    "ports": ["80", "443"],
                    "security_groups": ["sg-1"],
                }
            ],
            "nlbs": [],
            "elbs": [],
        }

import pytest

from seq_testkit.errors import DefinitionError
from seq_testkit.suite import TestPlanBuilder as PlanBuilder, TestSuite as BaseSuite, test_method

from helpers import ConfigurableSuite


async def _noop():
    pass


class TestRegistration:
    def test_definition_order_with_platform_tests_last(self):
        names = [e.name for e in ConfigurableSuite().test_plan("android")]
        assert names == ["test1", "test2", "test_skipped", "test_skipped_from_test", "test_failed", "android_test"]

    def test_other_platforms_get_only_common_tests(self):
        names = [e.name for e in ConfigurableSuite().test_plan("linux")]
        assert "android_test" not in names and "ios_test" not in names
        assert len(names) == 5

    def test_platform_match_ignores_case(self):
        names = [e.name for e in ConfigurableSuite().test_plan("iOS")]
        assert names[-1] == "ios_test"

    def test_inherited_tests_run_first(self):
        class Base(BaseSuite):
            @test_method
            async def test_base(self):
                pass

        class Child(Base):
            @test_method
            async def test_child(self):
                pass

        assert [e.name for e in Child().test_plan("linux")] == ["test_base", "test_child"]

    def test_bodies_are_bound(self):
        suite = ConfigurableSuite()
        entry = suite.test_plan("linux")[0]
        assert entry.body.__self__ is suite

    def test_default_suite_name_is_class_name(self):
        assert ConfigurableSuite().suite_name == "ConfigurableSuite"
        assert ConfigurableSuite("custom").suite_name == "custom"


class TestPlanBuilding:
    def test_builder_keeps_order(self):
        b = PlanBuilder("android")
        b.add("mobile", _noop, ["android", "ios"]).add("first", _noop).add("desktop", _noop, ["linux"])
        b.add("second", _noop)
        assert [e.name for e in b.build()] == ["first", "second", "mobile"]

    def test_duplicate_name_is_rejected(self):
        b = PlanBuilder("linux").add("t", _noop)
        with pytest.raises(DefinitionError, match="registered twice"):
            b.add("t", _noop)

    def test_entry_applies_to(self):
        entry = PlanBuilder("linux").add("t", _noop, ["Android"]).build()
        assert entry == []
        b = PlanBuilder("android").add("t", _noop, ["Android"])
        assert b.build()[0].applies_to("ANDROID")


class TestSuiteContext:
    def test_context_outside_of_run(self):
        suite = ConfigurableSuite()
        with pytest.raises(DefinitionError):
            suite.context
        with pytest.raises(DefinitionError):
            suite.report_info("nobody listens")

    def test_contexts_are_per_suite(self):
        a, b = ConfigurableSuite("a"), ConfigurableSuite("b")
        a._assign_context(object())
        try:
            with pytest.raises(DefinitionError):
                b.context
        finally:
            a._assign_context(None)

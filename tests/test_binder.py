"""Tests for attribute binding in classy_enum._binder."""

import logging

import pytest

import classy_enum as ce
from classy_enum._binder import camelize, singularize


class Severity(ce.ClassyEnum):
    pass


class Minor(Severity):
    pass


class Major(Severity):
    pass


class Critical(Severity):
    pass


class Incident(ce.Document):
    severity = ce.enum_attr()
    level = ce.enum_attr(enum="Severity", allow_nil=True)
    rank = ce.enum_attr(enum=Severity, allow_blank=True, default="minor")
    grade = ce.enum_attr(class_name="Severity", serialize_as_json=True)


class TestResolution:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("priority", "Priority"),
            ("alarm_priority", "AlarmPriority"),
            ("Priority", "Priority"),
            ("HTTPStatus", "HTTPStatus"),
        ],
    )
    def test_camelize(self, name: str, expected: str) -> None:
        assert camelize(name) == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("priorities", "priority"),
            ("statuses", "status"),
            ("boxes", "box"),
            ("colors", "color"),
            ("class", "class"),
            ("severity", "severity"),
        ],
    )
    def test_singularize(self, name: str, expected: str) -> None:
        assert singularize(name) == expected

    def test_resolves_from_attribute_name(self) -> None:
        assert ce.resolve_enum("severity") is Severity

    def test_resolves_from_plural_attribute_name(self) -> None:
        assert ce.resolve_enum("severities") is Severity

    def test_resolves_from_identifier(self) -> None:
        assert ce.resolve_enum("anything", enum="Severity") is Severity
        assert ce.resolve_enum("anything", class_name="severity") is Severity

    def test_enum_takes_precedence_over_class_name(self) -> None:
        assert ce.resolve_enum("anything", enum=Severity, class_name="Missing") is Severity

    def test_resolves_from_dotted_path(self) -> None:
        assert ce.resolve_enum("anything", enum=f"{__name__}:Severity") is Severity
        assert ce.resolve_enum("anything", enum=f"{__name__}.Severity") is Severity

    def test_unknown_identifier_raises(self) -> None:
        with pytest.raises(ce.ResolutionError, match="no enum registered as Missing"):
            ce.resolve_enum("anything", enum="Missing")

    def test_unknown_attribute_raises(self) -> None:
        with pytest.raises(ce.ResolutionError, match="Nothings or Nothing"):
            ce.resolve_enum("nothings")

    def test_unknown_dotted_path_raises(self) -> None:
        with pytest.raises(ce.ResolutionError, match="Cannot resolve enum"):
            ce.resolve_enum("anything", enum="no_such_module:Severity")

    def test_non_enum_raises(self) -> None:
        with pytest.raises(ce.ResolutionError, match="is not an enum class"):
            ce.resolve_enum("anything", enum=int)

    def test_abstract_base_raises(self) -> None:
        with pytest.raises(ce.ResolutionError, match="is not an enum class"):
            ce.resolve_enum("anything", enum=ce.ClassyEnum)


class TestBindings:
    def test_bindings_are_recorded(self) -> None:
        assert set(ce.bindings(Incident)) == {"severity", "level", "rank", "grade"}

    def test_binding_descriptor(self) -> None:
        binding = ce.bindings(Incident)["rank"]

        assert binding == ce.EnumBinding(
            name="rank",
            enum_cls=Severity,
            allow_blank=True,
            default="minor",
        )
        assert binding.nil_or_blank_allowed

    def test_binding_is_immutable(self) -> None:
        binding = ce.bindings(Incident)["severity"]

        with pytest.raises(AttributeError):
            binding.allow_nil = True  # type: ignore[misc]

    def test_class_attribute_is_descriptor(self) -> None:
        assert isinstance(Incident.severity, ce.EnumAttribute)
        assert Incident.severity.binding is ce.bindings(Incident)["severity"]

    def test_bindings_are_inherited(self) -> None:
        class MajorIncident(Incident):
            category = ce.enum_attr(enum=Severity)

        assert set(ce.bindings(MajorIncident)) == {"severity", "level", "rank", "grade", "category"}
        assert "category" not in ce.bindings(Incident)

    def test_subclass_may_rebind_inherited_attribute(self) -> None:
        class LenientIncident(Incident):
            pass

        ce.bind(LenientIncident, "severity", allow_nil=True)

        assert ce.bindings(LenientIncident)["severity"].allow_nil
        assert not ce.bindings(Incident)["severity"].allow_nil

    def test_rebound_attribute_replaces_inherited_rule_and_default(self) -> None:
        class Account(ce.Document):
            tier = ce.enum_attr(enum=Severity, default="major")

        class GuestAccount(Account):
            pass

        ce.bind(GuestAccount, "tier", enum=Severity, allow_nil=True)

        assert GuestAccount.instantiate({}).validate()
        assert GuestAccount().read_attribute("tier") is None
        assert Account().read_attribute("tier") == "major"
        assert not Account.instantiate({}).validate()

    def test_rebound_attribute_uses_its_own_default(self) -> None:
        class Account(ce.Document):
            tier = ce.enum_attr(enum=Severity, default="major")

        class PremiumAccount(Account):
            tier = ce.enum_attr(enum=Severity, default="critical")

        assert PremiumAccount().read_attribute("tier") == "critical"
        assert Account().read_attribute("tier") == "major"


class TestBind:
    def test_bind_returns_binding(self) -> None:
        class Ticket(ce.Document):
            pass

        binding = ce.bind(Ticket, "severity", default=Major)

        assert binding.default == "major"
        assert binding.enum_cls is Severity
        assert Ticket(severity="critical").severity == Critical

    def test_bind_twice_raises(self) -> None:
        class Ticket(ce.Document):
            pass

        ce.bind(Ticket, "severity")
        with pytest.raises(ce.BindingError, match="already bound"):
            ce.bind(Ticket, "severity")

    def test_unknown_option_raises(self) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.BindingError, match="Invalid options"):
            ce.bind(Ticket, "severity", allow_empty=True)

    def test_non_bool_flag_raises(self) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.BindingError, match="Invalid options"):
            ce.bind(Ticket, "severity", allow_nil="yes")

    @pytest.mark.parametrize("name", ["", "not valid", "1st"])
    def test_invalid_attribute_name_raises(self, name: str) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.BindingError, match="non-empty identifier"):
            ce.bind(Ticket, name, enum=Severity)

    def test_unresolvable_enum_raises(self) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.ResolutionError):
            ce.bind(Ticket, "urgency")

    def test_invalid_default_raises(self) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.DefaultResolutionError, match="'trivial'"):
            ce.enum_attr(default="trivial").__set_name__(Ticket, "severity")

    def test_failed_bind_installs_nothing(self) -> None:
        class Ticket(ce.Document):
            pass

        with pytest.raises(ce.DefaultResolutionError):
            ce.bind(Ticket, "severity", default="trivial")

        assert ce.bindings(Ticket) == {}
        assert not hasattr(Ticket, "severity")

    def test_blank_default_registers_no_hook(self) -> None:
        class Ticket(ce.Document):
            severity = ce.enum_attr(default="")

        assert ce.bindings(Ticket)["severity"].default is None
        assert Ticket().read_attribute("severity") is None

    def test_bind_logs_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        class Ticket(ce.Document):
            pass

        with caplog.at_level(logging.DEBUG, logger="classy_enum"):
            ce.bind(Ticket, "severity")

        assert "Bound enum attribute 'severity' of Ticket" in caplog.text

    def test_unbound_descriptor_raises_on_access(self) -> None:
        attribute = ce.EnumAttribute()

        class Holder:
            pass

        with pytest.raises(AttributeError, match="not bound"):
            attribute.__get__(Holder())


class TestAccessors:
    def test_getter_returns_member(self) -> None:
        incident = Incident(severity="major")

        assert isinstance(incident.severity, Major)
        assert incident.severity.owner is incident

    def test_getter_passes_binding_context(self) -> None:
        incident = Incident(grade="minor", level=None)

        assert incident.grade.serialize_as_json is True
        assert incident.grade.allow_blank is False
        assert incident.level.allow_blank is True
        assert incident.rank.allow_blank is True

    def test_getter_does_not_cache(self) -> None:
        incident = Incident(severity="major")
        first = incident.severity

        incident.write_attribute("severity", "critical")

        assert first == Major
        assert incident.severity == Critical

    @pytest.mark.parametrize("value", ["critical", Critical, Critical()])
    def test_setter_accepts_all_input_shapes(self, value: object) -> None:
        incident = Incident()
        incident.severity = value

        assert incident.read_attribute("severity") == "critical"

    def test_setter_keeps_unknown_values(self) -> None:
        incident = Incident()
        incident.severity = "catastrophic"

        assert incident.read_attribute("severity") == "catastrophic"
        assert incident.severity.id == "catastrophic"

    def test_setter_round_trip_is_idempotent(self) -> None:
        incident = Incident(severity="major", level="minor", rank="critical", grade="major")

        for name in ce.bindings(Incident):
            before = incident.read_attribute(name)
            setattr(incident, name, getattr(incident, name))
            assert incident.read_attribute(name) == before

    def test_setter_none_falls_back_to_default(self) -> None:
        class Ticket(ce.Document):
            severity = ce.enum_attr(default="major")

        ticket = Ticket(severity="critical")
        ticket.severity = None

        assert ticket.read_attribute("severity") == "major"

    def test_setter_none_kept_when_nil_allowed(self) -> None:
        incident = Incident(level="major")
        incident.level = None

        assert incident.read_attribute("level") is None


class TestCustomHost:
    """Binding only relies on the collaborator protocols."""

    class Record:
        rules: list[tuple[str, object, bool, bool]] = []
        hooks: list[object] = []

        def __init__(self) -> None:
            self.store: dict[str, object] = {}
            for hook in self.hooks:
                hook(self)

        @classmethod
        def validates_inclusion_of(cls, name, in_, *, allow_blank=False, allow_nil=False) -> None:  # noqa: ANN001
            cls.rules.append((name, in_, allow_blank, allow_nil))

        @classmethod
        def after_initialize(cls, callback) -> None:  # noqa: ANN001
            cls.hooks.append(callback)

        def read_attribute(self, name: str) -> object:
            return self.store.get(name)

        def write_attribute(self, name: str, value: object) -> None:
            self.store[name] = value

    def test_bind_to_custom_host(self) -> None:
        ce.bind(self.Record, "severity", allow_blank=True, default="critical")
        record = self.Record()

        assert self.Record.rules == [("severity", Severity, True, False)]
        assert len(self.Record.hooks) == 1
        assert isinstance(record, ce.AttributeStore)
        assert record.store == {"severity": "critical"}
        assert record.severity == Critical


class TestNonStringRawValues:
    class Level(ce.ClassyEnum):
        pass

    class One(Level, option="1"):
        pass

    class Box(ce.Document):
        pass

    ce.bind(Box, "level", enum=Level)

    def test_non_string_raw_value_is_not_a_member(self) -> None:
        box = self.Box.instantiate({"level": 1})

        assert not box.validate()
        assert box.level.index is None
        assert box.level.id == 1

    def test_round_trip_keeps_non_string_raw_value(self) -> None:
        box = self.Box.instantiate({"level": 1})
        box.level = box.level

        assert box.read_attribute("level") == 1
        assert isinstance(box.read_attribute("level"), int)

    def test_string_identifier_is_a_member(self) -> None:
        box = self.Box(level="1")

        assert box.validate()
        assert isinstance(box.level, self.One)

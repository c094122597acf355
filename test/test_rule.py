import pytest


def rules(*raw):
    """Parse raw rules the same way argument rules of structured metadata are.
    """
    from coppermc.manifest import ArgumentRule
    return [ArgumentRule.model_validate(rule) for rule in raw]


def test_context_immutable(make_ctx):

    ctx = make_ctx()
    with pytest.raises(AttributeError):
        ctx.os_name = "windows"
    with pytest.raises(AttributeError):
        del ctx.demo


def test_context_features(make_ctx):

    from coppermc.rule import QuickPlayMultiplayer

    assert make_ctx().enabled_features() == []
    assert make_ctx(demo=True).enabled_features() == ["is_demo_user"]

    features = make_ctx(quick_play=QuickPlayMultiplayer("localhost"), quick_plays_support=True).features()
    assert features["is_quick_play_multiplayer"]
    assert features["has_quick_plays_support"]
    assert not features["is_quick_play_singleplayer"]
    assert not features["is_quick_play_realms"]
    assert not features["is_demo_user"]


def test_context_windows_version(make_ctx):

    assert make_ctx("windows", os_version="10.0.19045").is_windows_10_or_later()
    assert make_ctx("windows", os_version="11.0.22621").is_windows_10_or_later()
    assert not make_ctx("windows", os_version="6.1.7601").is_windows_10_or_later()
    assert not make_ctx("windows", os_version=None).is_windows_10_or_later()
    assert not make_ctx("linux", os_version="10.0").is_windows_10_or_later()


def test_empty_rules(make_ctx):

    from coppermc.rule import interpret_rule

    assert interpret_rule(None, make_ctx())
    assert interpret_rule([], make_ctx())


def test_os_rules(make_ctx):

    from coppermc.rule import interpret_rule

    osx = rules({"action": "allow", "os": {"name": "osx"}})
    assert interpret_rule(osx, make_ctx("osx"))
    assert not interpret_rule(osx, make_ctx("linux"))

    x86 = rules({"action": "allow", "os": {"arch": "x86"}})
    assert interpret_rule(x86, make_ctx(arch="x86"))
    assert not interpret_rule(x86, make_ctx(arch="x86_64"))

    win10 = rules({"action": "allow", "os": {"name": "windows", "version": "^10\\."}})
    assert interpret_rule(win10, make_ctx("windows", os_version="10.0.19045"))
    assert not interpret_rule(win10, make_ctx("windows", os_version="6.3.9600"))
    assert not interpret_rule(win10, make_ctx("linux"))

    # Unknown host facts never match a constraint, but rules without it still pass.
    assert not interpret_rule(osx, make_ctx(None, None))
    assert interpret_rule(rules({"action": "allow"}), make_ctx(None, None))


def test_feature_rules(make_ctx):

    from coppermc.rule import interpret_rule, QuickPlaySingleplayer

    demo = rules({"action": "allow", "features": {"is_demo_user": True}})
    assert interpret_rule(demo, make_ctx(demo=True))
    assert not interpret_rule(demo, make_ctx())

    not_demo = rules({"action": "allow", "features": {"is_demo_user": False}})
    assert interpret_rule(not_demo, make_ctx())
    assert not interpret_rule(not_demo, make_ctx(demo=True))

    singleplayer = rules({"action": "allow", "features": {"is_quick_play_singleplayer": True}})
    assert interpret_rule(singleplayer, make_ctx(quick_play=QuickPlaySingleplayer("world")))
    assert not interpret_rule(singleplayer, make_ctx())


def test_rules_conjunction(make_ctx):

    from coppermc.rule import interpret_rule

    both = rules(
        {"action": "allow", "os": {"name": "linux"}},
        {"action": "allow", "features": {"has_custom_resolution": True}})

    assert interpret_rule(both, make_ctx("linux", custom_resolution=True))
    assert not interpret_rule(both, make_ctx("linux"))
    assert not interpret_rule(both, make_ctx("windows", custom_resolution=True))


@pytest.mark.parametrize("raw, kind", [
    ({"action": "disallow", "os": {"name": "osx"}}, "action"),
    ({"action": "allow", "os": {"name": "solaris"}}, "os_name"),
    ({"action": "allow", "os": {"arch": "riscv64"}}, "os_arch"),
    ({"action": "allow", "os": {"name": "windows", "version": "^6\\."}}, "os_version"),
    ({"action": "allow", "os": {"name": "osx", "version": "^10\\."}}, "os_version"),
    ({"action": "allow", "os": {"version": "^10\\."}}, "os_version"),
    ({"action": "allow", "features": {"is_flying": True}}, "feature"),
])
def test_unsupported_predicates(make_ctx, raw, kind):

    from coppermc.rule import interpret_rule, UnsupportedPredicateError

    # Unsupported predicates fail on every host, whatever the rule would give.
    for ctx in (make_ctx("linux"), make_ctx("windows", "x86", "10.0"), make_ctx("osx", "arm64")):
        with pytest.raises(UnsupportedPredicateError) as exc_info:
            interpret_rule(rules(raw), ctx, "test")
        assert exc_info.value.kind == kind
        assert exc_info.value.path.startswith("test/0/")


def test_unsupported_after_failing_rule(make_ctx):

    from coppermc.rule import interpret_rule, UnsupportedPredicateError

    # The first rule fails on linux, evaluation stops before the unsupported one.
    mixed = rules(
        {"action": "allow", "os": {"name": "osx"}},
        {"action": "disallow"})
    assert not interpret_rule(mixed, make_ctx("linux"))

    with pytest.raises(UnsupportedPredicateError):
        interpret_rule(mixed, make_ctx("osx"))


def test_quick_play_replacements():

    from coppermc.rule import QuickPlaySingleplayer, QuickPlayMultiplayer, QuickPlayRealms

    replacements = {}
    QuickPlayMultiplayer("mc.example.com").add_args_replacements(replacements)
    assert replacements == {"quickPlayMultiplayer": "mc.example.com:25565"}

    replacements = {}
    QuickPlayMultiplayer("localhost", 25566).add_args_replacements(replacements)
    assert replacements == {"quickPlayMultiplayer": "localhost:25566"}

    replacements = {}
    QuickPlaySingleplayer("New World").add_args_replacements(replacements)
    assert replacements == {"quickPlaySingleplayer": "New World"}

    replacements = {}
    QuickPlayRealms("1234").add_args_replacements(replacements)
    assert replacements == {"quickPlayRealms": "1234"}

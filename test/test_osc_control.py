from pulsecore.events import PatternEngine
from pulsecore.osc_control import OscControl, apply_messages
from pulsecore.settings import PatternSettings
from pulsescenes.modes import PatternMode


def make_engine():
    return PatternEngine(settings=PatternSettings(), seed=0)


def test_handle_and_drain():
    control = OscControl(port=0)
    control.handle("/pulsegrid/toggle")
    control.handle("/pulsegrid/intensity", 0.9)
    messages = control.drain()
    assert messages == [("/pulsegrid/toggle", ()), ("/pulsegrid/intensity", (0.9,))]
    assert control.drain() == []


def test_full_queue_drops():
    control = OscControl(port=0, maxsize=1)
    control.handle("/pulsegrid/toggle")
    control.handle("/pulsegrid/toggle")
    assert len(control.drain()) == 1


def test_apply_settings_messages():
    engine = make_engine()
    applied = apply_messages(engine, [
        ("/pulsegrid/intensity", (3.0,)),
        ("/pulsegrid/speed", ("heat_pulse", 1.7)),
        ("/pulsegrid/brightness", ("Heat Pulse", 0.0)),
        ("/pulsegrid/scheme", ("heat_pulse", "Electric")),
        ("/pulsegrid/running", (0,)),
    ])
    assert applied == 5
    assert engine.intensity == 1.0
    config = engine.settings.settings_for(PatternMode.HEAT_PULSE)
    assert config.speed == 1.7
    assert config.brightness == 0.1
    assert config.color_scheme.name == "Electric"
    assert not engine.is_running


def test_activate_and_deactivate_messages():
    engine = make_engine()
    apply_messages(engine, [("/pulsegrid/activate", ("stress_wave",))])
    assert engine.has_mode(PatternMode.STRESS_WAVE)
    apply_messages(engine, [("/pulsegrid/deactivate", ("Stress Wave",))])
    assert engine.timers == {}


def test_bad_and_foreign_messages_are_not_counted():
    engine = make_engine()
    applied = apply_messages(engine, [
        ("/other/toggle", ()),
        ("/pulsegrid/unknown", ()),
        ("/pulsegrid/speed", ("plasma", 1.0)),
        ("/pulsegrid/intensity", ()),
        ("/pulsegrid/scheme", ("heat_pulse", "Plaid")),
        ("/pulsegrid/toggle", ()),
    ])
    assert applied == 1
    assert not engine.is_running

from __future__ import annotations

from cmu_bridge.frontend import DocumentHost, CommandHandler
from cmu_bridge.protocol import Command, CommandKind, ResourcePayload
from cmu_bridge.frontend.ids import CorrelationIds


def _command(kind: CommandKind, *resources: tuple[str, str]) -> Command:
    return Command(
        kind=kind,
        resources=tuple(ResourcePayload(location=location, contents=contents) for location, contents in resources),
    )


def test_load_js_injects_scripts_in_order() -> None:
    host = DocumentHost()
    handler = CommandHandler(host)

    count = handler.apply(_command(CommandKind.LOAD_JS, ("/a.js", "a()"), ("/b.js", "b()")))

    assert count == 2
    assert [(el.tag, el.location, el.contents) for el in host.elements] == [
        ("script", "/a.js", "a()"),
        ("script", "/b.js", "b()"),
    ]


def test_repeated_push_replaces_instead_of_duplicating() -> None:
    host = DocumentHost()
    handler = CommandHandler(host)

    handler.apply(_command(CommandKind.LOAD_CSS, ("/f.css", "a{}")))
    handler.apply(_command(CommandKind.LOAD_CSS, ("/f.css", "b{}")))

    assert len(host.elements) == 1
    element = host.find("/f.css")
    assert element is not None
    assert element.tag == "style"
    assert element.contents == "b{}"


def test_empty_push_is_a_no_op() -> None:
    host = DocumentHost()
    assert CommandHandler(host).apply(_command(CommandKind.LOAD_JS)) == 0
    assert host.elements == ()


def test_document_host_remove_reports_count() -> None:
    host = DocumentHost()
    handler = CommandHandler(host)
    handler.apply(_command(CommandKind.LOAD_JS, ("/x.js", "1")))

    assert host.remove("/x.js") == 1
    assert host.remove("/x.js") == 0


def test_correlation_ids_follow_the_clock() -> None:
    now = [5000]
    ids = CorrelationIds(lambda: now[0])

    first = ids.next(set())
    now[0] = 6000
    second = ids.next(set())

    assert (first, second) == (5000, 6000)


def test_correlation_ids_never_repeat_or_collide() -> None:
    ids = CorrelationIds(lambda: 100)
    pending = {101, 102}

    assert ids.next(set()) == 100
    assert ids.next(pending) == 103
    assert ids.next(pending) == 104


def test_correlation_ids_do_not_go_backwards_when_the_clock_does() -> None:
    now = [900]
    ids = CorrelationIds(lambda: now[0])
    assert ids.next(set()) == 900
    now[0] = 10
    assert ids.next(set()) == 901

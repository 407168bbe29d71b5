from __future__ import annotations

SCROLL_STEP_PX = 100

CONTEXT_MENU = (
    "var evt = new MouseEvent('contextmenu', {bubbles: true, cancelable: true, view: window});"
    "arguments[0].dispatchEvent(evt);"
)

DESELECT_OPTION = "arguments[0].selected = false;"

SCROLL_BY = {
    "up": f"window.scrollBy(0, -{SCROLL_STEP_PX});",
    "down": f"window.scrollBy(0, {SCROLL_STEP_PX});",
    "left": f"window.scrollBy(-{SCROLL_STEP_PX}, 0);",
    "right": f"window.scrollBy({SCROLL_STEP_PX}, 0);",
}

# dragstart on the source, drop on the target, dragend on the source, all
# sharing one dataTransfer so the drop handler sees what dragstart stored.
DRAG_AND_DROP = """
(function (source, target) {
    function makeEvent(type, transfer) {
        var event = new CustomEvent(type, {bubbles: true, cancelable: true});
        event.dataTransfer = transfer || {
            data: {},
            setData: function (kind, val) { this.data[kind] = val; },
            getData: function (kind) { return this.data[kind]; }
        };
        return event;
    }
    var start = makeEvent('dragstart');
    source.dispatchEvent(start);
    target.dispatchEvent(makeEvent('drop', start.dataTransfer));
    source.dispatchEvent(makeEvent('dragend', start.dataTransfer));
})(arguments[0], arguments[1]);
"""

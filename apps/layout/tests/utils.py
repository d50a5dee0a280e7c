from apps.layout.engine.types import ContentKind, GridPosition, Widget, WidgetContent


def make_widget(widget_id, x, y, width, height, kind=ContentKind.TEXT, title=None):
    return Widget(
        id=widget_id,
        position=GridPosition(x=x, y=y, width=width, height=height),
        content=WidgetContent(kind=kind, config={"content": widget_id or ""}),
        title=title,
    )


def pos(x, y, width, height):
    return GridPosition(x=x, y=y, width=width, height=height)

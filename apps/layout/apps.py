from importlib import import_module

from django.apps import AppConfig


class LayoutConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.layout"
    verbose_name = "Dashboard layout"

    def ready(self):
        from .conf import settings
        from .palette import register, register_builtins

        register_builtins()

        # Extra palette entries: "module" registers on import,
        # "module:callable" is called with the register function.
        for entry in getattr(settings, "LAYOUT_PALETTE", []):
            try:
                module_path, callable_name = entry.split(":", 1)
            except ValueError:
                import_module(entry)
            else:
                module = import_module(module_path)
                registrar = getattr(module, callable_name)
                registrar(register)

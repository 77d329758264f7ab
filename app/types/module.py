from fastapi import APIRouter


class CoreModule:
    def __init__(
        self,
        root: str,
        tag: str,
        router: APIRouter | None = None,
    ):
        """
        Initialize a new CoreModule object.
        :param root: the root of the module, used as the prefix of its routes
        :param tag: the tag of the module, used by FastAPI
        :param router: an optional custom APIRouter
        """
        self.root = root
        self.tag = tag
        self.router = router or APIRouter(tags=[tag])


class Module(CoreModule):
    """
    A feature module living in `app/modules/<name>/`.

    Each `endpoints_<name>.py` file should declare a `module` variable, it will be discovered by `app.module`.
    """

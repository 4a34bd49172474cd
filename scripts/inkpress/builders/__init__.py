from inkpress.builders.epub import EpubBuilder
from inkpress.builders.static import StaticBuilder

BUILDERS = {
    "epub": EpubBuilder,
    "static": StaticBuilder,
}

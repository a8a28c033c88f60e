"""rigidscene: a small language for rigid-body physics scenes.

Programs are parsed and evaluated by `rigidscene.lang`, hydrated into an
engine world by `rigidscene.sim`, and served over HTTP by `rigidscene.main`.
"""

__version__ = "0.1.0"

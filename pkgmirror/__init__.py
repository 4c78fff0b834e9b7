"""pkgmirror - 基于产品清单的软件包本地镜像与缓存"""

__version__ = "0.3.0"

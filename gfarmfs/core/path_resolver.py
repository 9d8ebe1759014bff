"""
路径解析器
把逻辑路径转换成后端使用的规范路径，纯字符串处理，不访问后端
"""

import logging
from typing import Optional, Union
from gfarmfs.domain.fs_path import FsPath
from gfarmfs.exceptions import WrongFileSystemError

logger = logging.getLogger(__name__)

PathLike = Union[str, FsPath]


class PathResolver:
    """
    路径解析器

    持有文件系统自身的scheme/authority和当前工作目录。
    工作目录只由 set_working_directory 修改，读取不加锁；
    多个线程同时修改同一实例的工作目录时需要调用方自行同步
    """
    
    def __init__(self, scheme: str, authority: Optional[str], working_dir: PathLike):
        """
        Args:
            scheme: 文件系统scheme，例如 gfarmfs
            authority: 文件系统authority，可以为空字符串
            working_dir: 初始工作目录，相对路径按根目录解析
        """
        self.scheme = scheme
        self.authority = authority if authority is not None else ""
        self._working_dir: FsPath = FsPath.from_parts(self.scheme, self.authority, "/")
        self.set_working_directory(working_dir)
    
    def get_uri(self) -> str:
        return f"{self.scheme}://{self.authority}"
    
    def get_working_directory(self) -> FsPath:
        return self._working_dir
    
    def set_working_directory(self, new_dir: PathLike):
        """把新目录解析为绝对路径并限定到本文件系统后保存"""
        self._working_dir = self.qualify(new_dir)
        logger.debug(f"Working directory set to {self._working_dir}")
    
    def make_absolute(self, path: PathLike) -> FsPath:
        """
        相对路径拼接到工作目录之后，绝对路径原样返回

        拼接时不重新解析相对部分，其中第一段带冒号（例如 gfarmfs:a:b 中的 a:b）
        也按普通名称处理，结果总是以 / 开头
        """
        path = FsPath.of(path)
        if path.is_absolute():
            return path
        wd = self._working_dir
        base = wd.get_uri_path().rstrip('/')
        return FsPath.from_parts(wd.get_scheme(), wd.get_authority(), f"{base}/{path.get_uri_path()}")
    
    def resolve(self, path: PathLike) -> str:
        """
        获取规范路径
        
        Returns:
            以 / 开头、不带scheme和authority的路径字符串
        """
        return self.make_absolute(path).get_uri_path()
    
    def check_path(self, path: PathLike):
        """
        检查路径是否属于本文件系统
        
        没有scheme，或scheme与本文件系统相同（忽略大小写）时通过
        
        Raises:
            WrongFileSystemError: scheme不同
        """
        path = FsPath.of(path)
        scheme = path.get_scheme()
        if scheme is None or scheme.lower() == self.scheme.lower():
            return
        raise WrongFileSystemError(path, self.get_uri())
    
    def qualify(self, path: PathLike) -> FsPath:
        """
        限定路径
        
        scheme匹配的路径改写为本文件系统的scheme和authority，
        没有scheme的路径先按工作目录解析为绝对路径
        """
        self.check_path(path)
        return self.make_absolute(path).with_scheme_and_authority(self.scheme, self.authority)

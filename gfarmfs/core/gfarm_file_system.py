"""
Gfarm文件系统适配层
在后端逐节点原语之上实现层次文件系统语义：
路径解析、存在性与覆盖检查、递归删除和递归创建目录、写入时创建父目录、
读取前的副本迁移以及错误码转换
"""

import logging
from typing import BinaryIO, Callable, List, Optional, Union
from gfarmfs.core.backend import GfarmBackend
from gfarmfs.core.http_backend import HttpGfarmBackend
from gfarmfs.core.path_resolver import PathResolver
from gfarmfs.core.replication_advisor import ReplicationAdvisor
from gfarmfs.domain.block_location import BlockLocation
from gfarmfs.domain.directory_listing import DirectoryListing
from gfarmfs.domain.file_status import FileStatus
from gfarmfs.domain.fs_path import FsPath
from gfarmfs.domain.fs_permission import FsPermission
from gfarmfs.exceptions import (
    BackendIOError,
    DirectoryNotEmptyError,
    InitializationError,
    PathExistsError,
    PathNotFoundError,
    UnsupportedOperationError,
)
from gfarmfs.util.configuration import (
    BLOCK_SIZE_KEY,
    Configuration,
    DEFAULT_BLOCK_SIZE,
    REPLICATION_ENABLED_KEY,
    WORKING_DIR_KEY,
    default_working_dir,
)

logger = logging.getLogger(__name__)

SCHEME = "gfarmfs"
DEFAULT_URI = f"{SCHEME}:///"

PathLike = Union[str, FsPath]
PermissionLike = Union[int, FsPermission]


def _mode(permission: Optional[PermissionLike]) -> int:
    if permission is None:
        return FsPermission.get_default().to_short()
    if isinstance(permission, FsPermission):
        return permission.to_short()
    return FsPermission(int(permission)).to_short()


class GfarmFileSystem:
    """
    Gfarm文件系统

    所有操作都是同步的请求/响应：先解析路径，再调用一个或多个后端原语。
    适配层不加锁，同一路径上的并发修改由后端自行处理
    """
    
    def __init__(self, backend: Optional[GfarmBackend] = None):
        """
        Args:
            backend: 后端，为None时在initialize中根据配置创建HttpGfarmBackend
        """
        self.backend: Optional[GfarmBackend] = backend
        self.conf: Optional[Configuration] = None
        self.resolver: Optional[PathResolver] = None
        self.replication_advisor: Optional[ReplicationAdvisor] = None
    
    @classmethod
    def get(cls, uri: str = DEFAULT_URI, conf: Optional[Configuration] = None,
            backend: Optional[GfarmBackend] = None) -> 'GfarmFileSystem':
        """创建并初始化文件系统"""
        fs = cls(backend)
        fs.initialize(uri, conf if conf is not None else Configuration())
        return fs
    
    def initialize(self, uri: str, conf: Configuration):
        """
        初始化文件系统
        
        建立后端连接，解析初始工作目录并查询一次以确认后端可达，
        任何一步失败都使整个初始化失败
        
        Args:
            uri: 文件系统URI，例如 gfarmfs:///
            conf: 配置
            
        Raises:
            InitializationError: 初始化失败
        """
        created_backend = self.backend is None
        try:
            fs_uri = FsPath.of(uri)
            scheme = fs_uri.get_scheme() or SCHEME
            authority = fs_uri.get_authority() or ""
            self.conf = conf
            if self.backend is None:
                self.backend = HttpGfarmBackend.from_configuration(conf)
            working_dirs = conf.get_strings(WORKING_DIR_KEY) or [default_working_dir()]
            self.resolver = PathResolver(scheme, authority, working_dirs[0])
            self.replication_advisor = ReplicationAdvisor(self.backend, conf)
            # 查询一次工作目录，确认后端可达；工作目录不存在不算失败
            working_dir = self.resolver.resolve(self.resolver.get_working_directory())
            if not self.backend.exists(working_dir):
                logger.warning(f"Working directory {working_dir} does not exist yet")
        except Exception as e:
            logger.error(f"Unable to initialize Gfarm file system: {e}")
            if created_backend and self.backend is not None:
                self.backend.close()
                self.backend = None
            raise InitializationError(f"Unable to initialize Gfarm file system: {e}") from e
        
        logger.info(f"Initialized GfarmFileSystem {self.get_uri()}, "
                    f"working directory {self.get_working_directory()}")
    
    def get_conf(self) -> Configuration:
        return self.conf
    
    def get_uri(self) -> str:
        return self.resolver.get_uri()
    
    def get_working_directory(self) -> FsPath:
        return self.resolver.get_working_directory()
    
    def set_working_directory(self, new_dir: PathLike):
        self.resolver.set_working_directory(new_dir)
    
    def check_path(self, path: PathLike):
        self.resolver.check_path(path)
    
    def make_qualified(self, path: PathLike) -> FsPath:
        return self.resolver.qualify(path)
    
    def _canonical(self, path: PathLike) -> str:
        """检查并解析为规范路径"""
        self.resolver.check_path(path)
        return self.resolver.resolve(path)
    
    def _error(self, code: int, path: str) -> BackendIOError:
        """把后端错误码转换为带描述的异常"""
        return BackendIOError(code, self.backend.get_error_string(code), path)
    
    def exists(self, path: PathLike) -> bool:
        return self.backend.exists(self._canonical(path))
    
    def is_file(self, path: PathLike) -> bool:
        return self.backend.is_file(self._canonical(path))
    
    def is_directory(self, path: PathLike) -> bool:
        return self.backend.is_directory(self._canonical(path))
    
    def get_file_size(self, path: PathLike) -> int:
        return self.backend.get_file_size(self._canonical(path))
    
    def get_default_block_size(self) -> int:
        return self.conf.get_int(BLOCK_SIZE_KEY, DEFAULT_BLOCK_SIZE)
    
    def open(self, path: PathLike, buffer_size: int = 4096) -> BinaryIO:
        """
        打开文件用于读取
        
        启用副本迁移时先检查本地副本，迁移失败不影响打开
        
        Args:
            path: 文件路径
            buffer_size: 保留参数，后端流自行缓冲
            
        Returns:
            绑定到规范路径的输入流
            
        Raises:
            PathNotFoundError: 文件不存在
        """
        srep = self._canonical(path)
        if not self.backend.exists(srep):
            raise PathNotFoundError(path)
        
        replication_desired = self.conf.get_boolean(REPLICATION_ENABLED_KEY, False)
        logger.debug(f"Replication is {'enabled' if replication_desired else 'disabled'}.")
        if replication_desired:
            self.replication_advisor.ensure_local_replica(srep)
        
        stream = self.backend.open_read(srep)
        logger.info(f"Opened file for reading: {srep}")
        return stream
    
    def create(self, path: PathLike, permission: Optional[PermissionLike] = None,
               overwrite: bool = True, buffer_size: int = 4096,
               replication: Optional[int] = None, block_size: Optional[int] = None,
               progress: Optional[Callable[[], None]] = None) -> BinaryIO:
        """
        创建文件用于写入
        
        已存在时按overwrite删除或报错，并逐级创建缺失的父目录
        
        Args:
            path: 文件路径
            permission: 文件权限
            overwrite: 已存在时是否覆盖
            buffer_size: 保留参数
            replication: 保留参数，副本数由后端决定
            block_size: 保留参数，后端不分块
            progress: 保留参数，不会被调用
            
        Returns:
            绑定到规范路径的输出流
            
        Raises:
            PathExistsError: 文件已存在且overwrite为False
            BackendIOError: 创建父目录或文件失败
        """
        if self.exists(path):
            if overwrite:
                self.delete(path, True)
            else:
                raise PathExistsError(path)
        
        absolute = self.resolver.make_absolute(path)
        parent = absolute.get_parent()
        if parent is not None:
            try:
                self.mkdirs(parent)
            except BackendIOError as e:
                raise BackendIOError(e.code, f"Mkdirs failed to create parent ({e.error_string})",
                                     parent.get_uri_path()) from e
        
        srep = absolute.get_uri_path()
        stream = self.backend.create_write(srep, _mode(permission))
        logger.info(f"Created file for writing: {srep}")
        return stream
    
    def append(self, path: PathLike, buffer_size: int = 4096,
               progress: Optional[Callable[[], None]] = None) -> BinaryIO:
        """后端没有追加写原语"""
        raise UnsupportedOperationError("append")
    
    def rename(self, src: PathLike, dst: PathLike) -> bool:
        """
        重命名
        
        Raises:
            BackendIOError: 后端返回非零错误码
        """
        srep_src = self._canonical(src)
        srep_dst = self._canonical(dst)
        code = self.backend.rename(srep_src, srep_dst)
        if code != 0:
            raise self._error(code, srep_src)
        logger.info(f"Renamed {srep_src} to {srep_dst}")
        return True
    
    def delete(self, path: PathLike, recursive: bool = True) -> bool:
        """
        删除文件或目录
        
        目录按深度优先先删除全部子节点，再删除已经清空的目录本身。
        子节点删除失败时立即向上抛出，已删除的部分不会恢复
        
        Args:
            path: 文件或目录路径
            recursive: 是否递归删除非空目录
            
        Returns:
            路径不存在时返回False，否则返回True
            
        Raises:
            DirectoryNotEmptyError: 非递归删除非空目录
            BackendIOError: 后端删除失败
        """
        srep = self._canonical(path)
        if not self.backend.exists(srep):
            return False
        
        if self.backend.is_file(srep):
            code = self.backend.remove(srep)
            if code != 0:
                raise self._error(code, srep)
            logger.info(f"Deleted: {srep}")
            return True
        
        entries = self.list_status(srep)
        if not recursive and len(entries) > 0:
            raise DirectoryNotEmptyError(path)
        for entry in entries:
            self.delete(entry.get_path(), recursive)
        
        code = self.backend.rmdir(srep)
        if code != 0:
            raise self._error(code, srep)
        logger.info(f"Deleted directory: {srep}")
        return True
    
    def list_status(self, path: PathLike) -> DirectoryListing:
        """
        列出目录内容
        
        文件返回只包含自身的列表；目录返回直接子节点，不包含 . 和 ..。
        底层列目录调用失败时返回"列表不可用"而不是抛出异常
        
        Args:
            path: 目录或文件路径
            
        Returns:
            目录列表
        """
        srep = self._canonical(path)
        if self.backend.is_file(srep):
            return DirectoryListing([self.get_file_status(path)])
        
        try:
            names = self.backend.readdir(srep)
        except Exception as e:
            logger.warning(f"Listing of {srep} unavailable: {e}")
            return DirectoryListing.unavailable(str(e))
        if names is None:
            return DirectoryListing.unavailable(f"No listing returned for {srep}")
        
        base = FsPath.of(path)
        statuses: List[FileStatus] = []
        for name in names:
            if name in ('.', '..'):
                continue
            statuses.append(self.get_file_status(base.with_child_name(name)))
        
        logger.debug(f"Listed {len(statuses)} items in {srep}")
        return DirectoryListing(statuses)
    
    def mkdirs(self, path: PathLike, permission: Optional[PermissionLike] = None) -> bool:
        """
        递归创建目录
        
        从根到叶逐级创建，已存在的目录跳过
        
        Raises:
            BackendIOError: 某一级创建失败
        """
        srep = self._canonical(path)
        mode = _mode(permission)
        current = ""
        for segment in srep.split('/'):
            if not segment:
                continue
            current += '/' + segment
            if self.backend.is_directory(current):
                continue
            code = self.backend.mkdir(current, mode)
            if code != 0:
                raise self._error(code, current)
            logger.debug(f"mkdir = {current}")
        return True
    
    def get_file_status(self, path: PathLike) -> FileStatus:
        """
        获取文件状态
        
        每次调用都实时查询后端
        
        Raises:
            PathNotFoundError: 路径不存在
        """
        srep = self._canonical(path)
        if not self.backend.exists(srep):
            raise PathNotFoundError(path)
        
        qualified = self.resolver.qualify(path)
        if self.backend.is_directory(srep):
            return FileStatus(0, True, 1, 0,
                              self.backend.get_modification_time(srep), 0,
                              FsPermission(self.backend.get_permission(srep)),
                              self.backend.get_owner(srep),
                              self.backend.get_group(srep),
                              qualified)
        return FileStatus(self.backend.get_file_size(srep),
                          False,
                          self.backend.get_replication(srep),
                          self.get_default_block_size(),
                          self.backend.get_modification_time(srep), 0,
                          FsPermission(self.backend.get_permission(srep)),
                          self.backend.get_owner(srep),
                          self.backend.get_group(srep),
                          qualified)
    
    def set_permission(self, path: PathLike, permission: PermissionLike):
        """修改权限位"""
        srep = self._canonical(path)
        code = self.backend.set_permission(srep, _mode(permission))
        if code != 0:
            raise self._error(code, srep)
    
    def get_file_block_locations(self, status: Optional[FileStatus], start: int,
                                 length: int) -> Optional[List[BlockLocation]]:
        """
        获取数据位置提示
        
        后端不支持按区间查询，整个文件作为一个覆盖 [0, length) 的区段返回
        
        Returns:
            status为None时返回None
        """
        if status is None:
            return None
        
        srep = self._canonical(status.get_path())
        hints = self.backend.get_data_location(srep, start, length)
        return [BlockLocation(None, hints, 0, length)]
    
    def close(self):
        """关闭文件系统"""
        if self.backend is not None:
            self.backend.close()
        logger.info("Closed GfarmFileSystem")
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

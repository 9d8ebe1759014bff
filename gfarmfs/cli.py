"""
gfarmfs 命令行接口
"""

import argparse
import logging
import sys
from gfarmfs.core.gfarm_file_system import DEFAULT_URI, GfarmFileSystem
from gfarmfs.domain.file_status import FileStatus
from gfarmfs.domain.fs_permission import FsPermission
from gfarmfs.exceptions import GfarmFSError
from gfarmfs.util.configuration import Configuration, GATEWAY_URL_KEY, ZOOKEEPER_HOSTS_KEY


def setup_logging(verbose: bool = False):
    """设置日志"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_configuration(args) -> Configuration:
    """环境变量打底，命令行参数覆盖"""
    conf = Configuration.from_env()
    for item in args.define or []:
        key, sep, value = item.partition('=')
        if not sep:
            raise ValueError(f"Invalid -D option, expected key=value: {item}")
        conf.set(key.strip(), value.strip())
    if args.gateway:
        conf.set(GATEWAY_URL_KEY, args.gateway)
    if args.zk_hosts:
        conf.set(ZOOKEEPER_HOSTS_KEY, args.zk_hosts)
    return conf


def _format_status(status: FileStatus) -> str:
    kind = "d" if status.is_directory() else "-"
    return (f"{kind}{status.get_permission()} {status.get_replication():>2} "
            f"{status.get_owner():<10} {status.get_group():<10} {status.get_len():>12} "
            f"{status.get_path()}")


def ls_command(fs: GfarmFileSystem, path: str):
    """列出目录内容"""
    listing = fs.list_status(path)
    if not listing.is_available():
        print(f"无法列出目录: {path} ({listing.error})")
        return 1
    for status in listing:
        print(_format_status(status))
    return 0


def stat_command(fs: GfarmFileSystem, path: str):
    """显示文件状态"""
    status = fs.get_file_status(path)
    print(f"路径: {status.get_path()}")
    print(f"类型: {status.get_type()}")
    print(f"大小: {status.get_len()} bytes")
    print(f"副本数: {status.get_replication()}")
    print(f"块大小: {status.get_block_size()}")
    print(f"修改时间: {status.get_modification_time()}")
    print(f"权限: {status.get_permission()}")
    print(f"属主: {status.get_owner()}:{status.get_group()}")
    return 0


def cat_command(fs: GfarmFileSystem, path: str):
    """输出文件内容"""
    with fs.open(path) as f:
        for chunk in f:
            sys.stdout.buffer.write(chunk)
    sys.stdout.flush()
    return 0


def put_command(fs: GfarmFileSystem, local_path: str, path: str, overwrite: bool):
    """上传本地文件"""
    with open(local_path, 'rb') as src, fs.create(path, overwrite=overwrite) as dst:
        while True:
            chunk = src.read(1024 * 1024)
            if not chunk:
                break
            dst.write(chunk)
    print(f"已上传: {local_path} -> {path}")
    return 0


def mkdir_command(fs: GfarmFileSystem, path: str):
    """创建目录"""
    fs.mkdirs(path)
    print(f"已创建目录: {path}")
    return 0


def rm_command(fs: GfarmFileSystem, path: str, recursive: bool):
    """删除文件或目录"""
    if not fs.delete(path, recursive):
        print(f"路径不存在: {path}")
        return 1
    print(f"已删除: {path}")
    return 0


def mv_command(fs: GfarmFileSystem, src: str, dst: str):
    """重命名"""
    fs.rename(src, dst)
    print(f"已重命名: {src} -> {dst}")
    return 0


def chmod_command(fs: GfarmFileSystem, mode: str, path: str):
    """修改权限"""
    fs.set_permission(path, FsPermission(int(mode, 8)))
    return 0


def locate_command(fs: GfarmFileSystem, path: str):
    """显示数据位置"""
    status = fs.get_file_status(path)
    for location in fs.get_file_block_locations(status, 0, status.get_len()) or []:
        print(f"[{location.get_offset()}, {location.get_length()}): {', '.join(location.get_hosts())}")
    return 0


def main(argv=None):
    """主函数"""
    parser = argparse.ArgumentParser(description="Gfarm文件系统命令行工具")
    parser.add_argument("--verbose", "-v", action="store_true", help="详细输出")
    parser.add_argument("--uri", default=DEFAULT_URI, help="文件系统URI")
    parser.add_argument("--gateway", help="Gfarm HTTP网关地址")
    parser.add_argument("--zk-hosts", help="用于发现网关的ZooKeeper地址")
    parser.add_argument("-D", dest="define", action="append", metavar="KEY=VALUE",
                        help="设置配置项，可重复")
    
    subparsers = parser.add_subparsers(dest="command", help="可用命令")
    
    ls_parser = subparsers.add_parser("ls", help="列出目录内容")
    ls_parser.add_argument("path", nargs="?", help="目录路径，默认为工作目录")
    
    stat_parser = subparsers.add_parser("stat", help="显示文件状态")
    stat_parser.add_argument("path", help="文件路径")
    
    cat_parser = subparsers.add_parser("cat", help="输出文件内容")
    cat_parser.add_argument("path", help="文件路径")
    
    put_parser = subparsers.add_parser("put", help="上传本地文件")
    put_parser.add_argument("local_path", help="本地文件路径")
    put_parser.add_argument("path", help="目标路径")
    put_parser.add_argument("--no-overwrite", action="store_true", help="目标已存在时失败")
    
    mkdir_parser = subparsers.add_parser("mkdir", help="递归创建目录")
    mkdir_parser.add_argument("path", help="目录路径")
    
    rm_parser = subparsers.add_parser("rm", help="删除文件或目录")
    rm_parser.add_argument("path", help="文件或目录路径")
    rm_parser.add_argument("-r", "--recursive", action="store_true", help="递归删除目录")
    
    mv_parser = subparsers.add_parser("mv", help="重命名")
    mv_parser.add_argument("src", help="源路径")
    mv_parser.add_argument("dst", help="目标路径")
    
    chmod_parser = subparsers.add_parser("chmod", help="修改权限")
    chmod_parser.add_argument("mode", help="八进制权限，例如 755")
    chmod_parser.add_argument("path", help="文件或目录路径")
    
    locate_parser = subparsers.add_parser("locate", help="显示数据位置")
    locate_parser.add_argument("path", help="文件路径")
    
    args = parser.parse_args(argv)
    
    if not args.command:
        parser.print_help()
        return 0
    
    setup_logging(args.verbose)
    
    try:
        fs = GfarmFileSystem.get(args.uri, build_configuration(args))
    except (GfarmFSError, ValueError) as e:
        print(f"连接失败: {e}", file=sys.stderr)
        return 1
    
    try:
        if args.command == "ls":
            return ls_command(fs, args.path or fs.get_working_directory())
        elif args.command == "stat":
            return stat_command(fs, args.path)
        elif args.command == "cat":
            return cat_command(fs, args.path)
        elif args.command == "put":
            return put_command(fs, args.local_path, args.path, not args.no_overwrite)
        elif args.command == "mkdir":
            return mkdir_command(fs, args.path)
        elif args.command == "rm":
            return rm_command(fs, args.path, args.recursive)
        elif args.command == "mv":
            return mv_command(fs, args.src, args.dst)
        elif args.command == "chmod":
            return chmod_command(fs, args.mode, args.path)
        elif args.command == "locate":
            return locate_command(fs, args.path)
        return 0
    
    except (GfarmFSError, ValueError) as e:
        print(f"命令执行失败: {e}", file=sys.stderr)
        return 1
    
    finally:
        fs.close()


if __name__ == "__main__":
    sys.exit(main())

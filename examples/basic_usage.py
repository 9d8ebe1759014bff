"""
基础使用示例
演示gfarmfs的基本用法，需要一个可访问的Gfarm HTTP网关
"""

import logging
import os
from gfarmfs import Configuration, FsPermission, GfarmFileSystem
from gfarmfs.exceptions import DirectoryNotEmptyError, GfarmFSError

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def main():
    """主函数"""
    print("=== gfarmfs 基础使用示例 ===\n")

    conf = Configuration.from_env()
    if "fs.gfarm.gateway.url" not in conf:
        conf.set("fs.gfarm.gateway.url", os.environ.get("GFARM_GATEWAY", "http://localhost:8600"))

    # 创建文件系统
    fs = GfarmFileSystem.get("gfarmfs:///", conf)
    print(f"工作目录: {fs.get_working_directory()}\n")

    try:
        # 1. 递归创建目录
        print("1. 递归创建目录...")
        fs.mkdirs("demo_dir/nested", FsPermission(0o755))
        print("   ✓ 目录创建成功: demo_dir/nested")

        # 2. 创建并写入文件，父目录自动创建
        print("\n2. 创建并写入文件...")
        with fs.create("demo_dir/docs/test.txt") as f:
            f.write_string("Hello, Gfarm! 这是一个测试文件。")
        print("   ✓ 文件创建并写入成功: demo_dir/docs/test.txt")

        # 3. 读取文件
        print("\n3. 读取文件...")
        with fs.open("demo_dir/docs/test.txt") as f:
            content = f.read()
            print(f"   ✓ 文件读取成功，内容: {content.decode('utf-8')}")

        # 4. 获取文件信息
        print("\n4. 获取文件信息...")
        status = fs.get_file_status("demo_dir/docs/test.txt")
        print(f"   ✓ 文件路径: {status.get_path()}")
        print(f"   ✓ 文件大小: {status.get_len()} bytes")
        print(f"   ✓ 文件类型: {status.get_type()}")
        print(f"   ✓ 副本数量: {status.get_replication()}")
        print(f"   ✓ 权限: {status.get_permission()} {status.get_owner()}:{status.get_group()}")

        # 5. 列出目录内容
        print("\n5. 列出目录内容...")
        listing = fs.list_status("demo_dir")
        if listing.is_available():
            print(f"   ✓ 目录中有 {len(listing)} 个文件/目录:")
            for item in listing:
                print(f"     - {item.get_path()} ({item.get_type()}, {item.get_len()} bytes)")
        else:
            print(f"   ✗ 列表不可用: {listing.error}")

        # 6. 数据位置
        print("\n6. 数据位置...")
        for location in fs.get_file_block_locations(status, 0, status.get_len()):
            print(f"   ✓ [{location.get_offset()}, {location.get_length()}): {location.get_hosts()}")

        # 7. 重命名
        print("\n7. 重命名...")
        fs.rename("demo_dir/docs/test.txt", "demo_dir/docs/renamed.txt")
        print(f"   ✓ 新文件存在: {fs.exists('demo_dir/docs/renamed.txt')}")

        # 8. 非递归删除非空目录会失败
        print("\n8. 非递归删除非空目录...")
        try:
            fs.delete("demo_dir", recursive=False)
        except DirectoryNotEmptyError as e:
            print(f"   ✓ 按预期失败: {e}")

        # 9. 递归删除
        print("\n9. 递归删除...")
        fs.delete("demo_dir", recursive=True)
        print(f"   ✓ 目录已删除: {not fs.exists('demo_dir')}")

        print("\n=== 示例执行完成 ===")

    except GfarmFSError as e:
        print(f"\n✗ 执行过程中发生错误: {e}")

    finally:
        fs.close()


if __name__ == "__main__":
    main()

"""
命令行接口测试
"""

import pytest
from unittest.mock import patch
from gfarmfs import GfarmFileSystem
from gfarmfs.cli import build_configuration, main
from gfarmfs.exceptions import InitializationError
from gfarmfs.util.configuration import GATEWAY_URL_KEY, WORKING_DIR_KEY, ZOOKEEPER_HOSTS_KEY


@pytest.fixture
def cli_backend(backend):
    """命令行使用内存后端"""
    real_get = GfarmFileSystem.get
    
    def fake_get(uri, conf):
        conf.set(WORKING_DIR_KEY, "/home/alice")
        return real_get(uri, conf, backend)
    
    with patch('gfarmfs.cli.GfarmFileSystem.get', side_effect=fake_get):
        yield backend


class TestCli:
    """命令行测试类"""
    
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "ls" in capsys.readouterr().out
    
    def test_build_configuration(self):
        parser_args = type("Args", (), {
            "define": ["fs.gfarm.replication.enabled = true"],
            "gateway": "http://gw:8600",
            "zk_hosts": "zk:2181",
        })()
        with patch.dict('os.environ', {"FS_GFARM_WORKINGDIR": "/data"}, clear=True):
            conf = build_configuration(parser_args)
        assert conf.get("fs.gfarm.replication.enabled") == "true"
        assert conf.get(GATEWAY_URL_KEY) == "http://gw:8600"
        assert conf.get(ZOOKEEPER_HOSTS_KEY) == "zk:2181"
        assert conf.get(WORKING_DIR_KEY) == "/data"
    
    def test_invalid_define(self, cli_backend, capsys):
        assert main(["-D", "novalue", "ls"]) == 1
        assert "novalue" in capsys.readouterr().err
    
    def test_ls_working_directory(self, cli_backend, capsys):
        """测试默认列出工作目录"""
        cli_backend.add_file("/home/alice/notes.txt", b"abc")
        assert main(["ls"]) == 0
        out = capsys.readouterr().out
        assert "gfarmfs:///home/alice/notes.txt" in out
        assert "-rw-r--r--" in out
    
    def test_ls_unavailable(self, cli_backend, capsys):
        cli_backend.readdir_error = RuntimeError("gateway down")
        assert main(["ls", "/"]) == 1
        assert "gateway down" in capsys.readouterr().out
    
    def test_mkdir_put_cat(self, cli_backend, tmp_path, capsysbinary):
        local = tmp_path / "local.txt"
        local.write_bytes(b"line one\nline two\n")
        assert main(["mkdir", "docs/a"]) == 0
        assert main(["put", str(local), "docs/a/remote.txt"]) == 0
        assert cli_backend.files["/home/alice/docs/a/remote.txt"] == b"line one\nline two\n"
        capsysbinary.readouterr()
        assert main(["cat", "docs/a/remote.txt"]) == 0
        assert capsysbinary.readouterr().out == b"line one\nline two\n"
    
    def test_put_no_overwrite(self, cli_backend, tmp_path, capsys):
        local = tmp_path / "local.txt"
        local.write_bytes(b"new")
        cli_backend.add_file("/home/alice/exists.txt", b"old")
        assert main(["put", "--no-overwrite", str(local), "exists.txt"]) == 1
        assert cli_backend.files["/home/alice/exists.txt"] == b"old"
        assert "exists.txt" in capsys.readouterr().err
    
    def test_rm(self, cli_backend, capsys):
        cli_backend.add_file("/home/alice/dir/f", b"x")
        assert main(["rm", "dir"]) == 1
        assert "/home/alice/dir/f" in cli_backend.files
        assert main(["rm", "-r", "dir"]) == 0
        assert "/home/alice/dir" not in cli_backend.dirs
        assert main(["rm", "dir"]) == 1
        assert "路径不存在" in capsys.readouterr().out
    
    def test_mv_chmod_stat_locate(self, cli_backend, capsys):
        cli_backend.add_file("/home/alice/a", b"12345")
        assert main(["mv", "a", "b"]) == 0
        assert main(["chmod", "600", "b"]) == 0
        assert cli_backend.modes["/home/alice/b"] == 0o600
        assert main(["stat", "b"]) == 0
        assert main(["locate", "/home/alice/b"]) == 0
        out = capsys.readouterr().out
        assert "大小: 5 bytes" in out
        assert "rw-------" in out
        assert "[0, 5): gfsd0" in out
    
    def test_connection_failure(self, capsys):
        with patch('gfarmfs.cli.GfarmFileSystem.get', side_effect=InitializationError("no gateway")):
            assert main(["ls"]) == 1
        assert "no gateway" in capsys.readouterr().err

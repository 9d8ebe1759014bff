"""
文件流测试
"""

import errno
import hashlib
import pytest
import requests
from unittest.mock import Mock
from gfarmfs.core.fs_input_stream import FSInputStream
from gfarmfs.core.fs_output_stream import FSOutputStream
from gfarmfs.exceptions import BackendIOError
from gfarmfs.util.http_client_util import HttpClientUtil

DATA = b"0123456789"


@pytest.fixture
def http_client():
    return Mock(spec=HttpClientUtil)


@pytest.fixture
def input_stream(http_client, make_response):
    """文件内容为 DATA，每次最多读取4字节"""
    def fake_get(url, params=None, check_status=True, **kwargs):
        offset, size = params["offset"], params["size"]
        return make_response(content=DATA[offset:offset + size])
    http_client.get.side_effect = fake_get
    return FSInputStream("/f", "http://gw:8600", len(DATA), http_client, chunk_size=4)


class TestFSInputStream:
    """文件输入流测试类"""
    
    def test_read_all_in_chunks(self, input_stream, http_client):
        """测试按块读取整个文件"""
        assert input_stream.read() == DATA
        sizes = [call.kwargs["params"]["size"] for call in http_client.get.call_args_list]
        assert sizes == [4, 4, 2]
        assert input_stream.tell() == len(DATA)
        assert input_stream.read() == b""
    
    def test_read_request_format(self, input_stream, http_client):
        input_stream.read(3)
        http_client.get.assert_called_once_with("http://gw:8600/file/read", check_status=False,
                                                params={"path": "/f", "offset": 0, "size": 3})
    
    def test_seek(self, input_stream):
        assert input_stream.seek(2) == 2
        assert input_stream.read(3) == b"234"
        assert input_stream.seek(-1, 2) == 9
        assert input_stream.read(5) == b"9"
        assert input_stream.seek(100) == len(DATA)
        assert input_stream.seek(-100, 1) == 0
        with pytest.raises(ValueError):
            input_stream.seek(0, 5)
    
    def test_calculate_md5_keeps_position(self, input_stream):
        input_stream.read(5)
        assert input_stream.calculate_md5() == hashlib.md5(DATA).hexdigest()
        assert input_stream.tell() == 5
    
    def test_iteration(self, input_stream):
        assert b"".join(input_stream) == DATA
    
    def test_length_fixed_at_open(self, http_client, make_response):
        """测试打开后追加的数据不会被读取"""
        grown = DATA + b"appended"
        def fake_get(url, params=None, check_status=True, **kwargs):
            offset, size = params["offset"], params["size"]
            return make_response(content=grown[offset:offset + size])
        http_client.get.side_effect = fake_get
        stream = FSInputStream("/f", "http://gw:8600", 4, http_client)
        assert stream.read() == b"0123"
        assert stream.read() == b""
        assert all(call.kwargs["params"]["offset"] + call.kwargs["params"]["size"] <= 4
                   for call in http_client.get.call_args_list)

    def test_read_after_close(self, input_stream):
        with input_stream:
            pass
        assert input_stream.closed
        with pytest.raises(ValueError):
            input_stream.read()
    
    def test_read_error(self, http_client, make_response):
        """测试网关返回错误时抛出带错误码的异常"""
        http_client.get.side_effect = None
        http_client.get.return_value = make_response(404, {"errno": errno.ENOENT, "error": "gone"})
        stream = FSInputStream("/f", "http://gw:8600", 10, http_client)
        with pytest.raises(BackendIOError) as excinfo:
            stream.read()
        assert excinfo.value.code == errno.ENOENT
        assert excinfo.value.path == "/f"
    
    def test_transport_error(self, http_client):
        http_client.get.side_effect = requests.exceptions.Timeout("read timed out")
        stream = FSInputStream("/f", "http://gw:8600", 10, http_client)
        with pytest.raises(BackendIOError) as excinfo:
            stream.read(1)
        assert excinfo.value.code == errno.EIO


class TestFSOutputStream:
    """文件输出流测试类"""
    
    @pytest.fixture
    def ok_client(self, http_client, make_response):
        http_client.post.return_value = make_response(body={"errno": 0})
        return http_client
    
    def test_buffer_flushes_when_full(self, ok_client):
        """测试缓冲区写满后按偏移量提交"""
        stream = FSOutputStream("/out", "http://gw:8600", ok_client, buffer_size=5)
        assert stream.write(b"Hello, World!") == 13
        ok_client.post.assert_called_once_with("http://gw:8600/file/write",
                                               params={"path": "/out", "offset": 0},
                                               data=b"Hello, World!", check_status=False)
        stream.write(b"abc")
        assert stream.tell() == 16
        stream.close()
        assert ok_client.post.call_args.kwargs["params"] == {"path": "/out", "offset": 13}
        assert ok_client.post.call_args.kwargs["data"] == b"abc"
    
    def test_close_flushes_remaining(self, ok_client):
        with FSOutputStream("/out", "http://gw:8600", ok_client) as stream:
            stream.write_string("Hello, World!")
            ok_client.post.assert_not_called()
        assert stream.closed
        assert ok_client.post.call_count == 1
        assert stream.get_md5() == "65a8e27d8879283831b664bd8b7f0ad4"
    
    def test_empty_write(self, ok_client):
        stream = FSOutputStream("/out", "http://gw:8600", ok_client)
        assert stream.write(b"") == 0
        stream.close()
        ok_client.post.assert_not_called()
    
    def test_write_after_close(self, ok_client):
        stream = FSOutputStream("/out", "http://gw:8600", ok_client)
        stream.close()
        with pytest.raises(ValueError):
            stream.write(b"x")
    
    def test_write_error(self, http_client, make_response):
        """测试网关拒绝写入时抛出异常"""
        http_client.post.return_value = make_response(body={"errno": errno.ENOSPC, "error": "quota exceeded"})
        stream = FSOutputStream("/out", "http://gw:8600", http_client)
        stream.write(b"data")
        with pytest.raises(BackendIOError) as excinfo:
            stream.flush()
        assert excinfo.value.code == errno.ENOSPC
        assert excinfo.value.error_string == "quota exceeded"

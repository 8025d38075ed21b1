"""Tests for the VISA and USB transport adapters (library calls mocked)."""
from unittest.mock import MagicMock, patch

import pyvisa
import pytest
import usb.core

from rigol_mso import (
    RigolScope,
    ScopeConnectionError,
    TransportError,
    UsbTransport,
    VisaTransport,
)


class TestVisaTransport:
    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_host_expanded_to_resource(self, mock_rm):
        VisaTransport("192.168.1.70")
        mock_rm.return_value.open_resource.assert_called_once()
        args, _kwargs = mock_rm.return_value.open_resource.call_args
        assert args[0] == "TCPIP::192.168.1.70::INSTR"

    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_full_resource_kept(self, mock_rm):
        VisaTransport("TCPIP0::10.0.0.5::inst0::INSTR", timeout=2.0)
        resource = mock_rm.return_value.open_resource.return_value
        args, _kwargs = mock_rm.return_value.open_resource.call_args
        assert args[0] == "TCPIP0::10.0.0.5::inst0::INSTR"
        assert resource.timeout == 2000

    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_write_and_read(self, mock_rm):
        resource = mock_rm.return_value.open_resource.return_value
        resource.write_raw.return_value = 4
        resource.visalib.read.return_value = (b"STOP\n", 0)
        t = VisaTransport("host")
        assert t.write(b"TRIG") == 4
        resource.write_raw.assert_called_once_with(b"TRIG")
        assert t.read(100) == b"STOP\n"
        resource.visalib.read.assert_called_once_with(resource.session, 100)

    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_io_errors_wrapped(self, mock_rm):
        resource = mock_rm.return_value.open_resource.return_value
        resource.write_raw.side_effect = pyvisa.Error("boom")
        resource.visalib.read.side_effect = pyvisa.Error("boom")
        t = VisaTransport("host")
        with pytest.raises(TransportError):
            t.write(b"x")
        with pytest.raises(TransportError):
            t.read(1)

    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_open_failure(self, mock_rm):
        mock_rm.return_value.open_resource.side_effect = pyvisa.Error("no route")
        with pytest.raises(ScopeConnectionError):
            VisaTransport("host")
        mock_rm.return_value.close.assert_called_once()

    @patch("rigol_mso.pyvisa.ResourceManager")
    def test_close_releases_session_and_manager(self, mock_rm):
        resource = mock_rm.return_value.open_resource.return_value
        with RigolScope.over_visa("host"):
            pass
        resource.close.assert_called_once()
        mock_rm.return_value.close.assert_called_once()


class TestUsbTransport:
    @patch("rigol_mso.usb.core.find", return_value=None)
    def test_device_not_found(self, mock_find):
        with pytest.raises(ScopeConnectionError, match="1ab1:04ce"):
            UsbTransport()
        mock_find.assert_called_once_with(idVendor=0x1AB1, idProduct=0x04CE)

    @patch("rigol_mso.usb.util.dispose_resources")
    @patch("rigol_mso.usb.core.find")
    def test_bulk_endpoints(self, mock_find, mock_dispose):
        device = MagicMock()
        device.write.return_value = 5
        device.read.return_value = bytearray(b"STOP\n")
        mock_find.return_value = device

        with UsbTransport(timeout=1.0) as t:
            assert t.write(b"*IDN?") == 5
            device.write.assert_called_once_with(0x03, b"*IDN?", 1000)
            assert t.read(100) == b"STOP\n"
            device.read.assert_called_once_with(0x81, 100, 1000)
        mock_dispose.assert_called_once_with(device)

    @patch("rigol_mso.usb.util.dispose_resources")
    @patch("rigol_mso.usb.core.find")
    def test_usb_errors_wrapped(self, mock_find, mock_dispose):
        device = MagicMock()
        device.write.side_effect = usb.core.USBError("pipe")
        device.read.side_effect = usb.core.USBError("timeout")
        mock_find.return_value = device
        t = UsbTransport()
        with pytest.raises(TransportError):
            t.write(b"x")
        with pytest.raises(TransportError):
            t.read(1)

    @patch("rigol_mso.usb.core.find", side_effect=usb.core.NoBackendError("No backend available"))
    def test_missing_libusb_backend(self, mock_find):
        with pytest.raises(ScopeConnectionError, match="libusb"):
            UsbTransport()

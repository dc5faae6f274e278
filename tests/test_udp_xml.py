import pytest
from hypothesis import given
from hypothesis import strategies as st

from neolink.udp_xml import (
    C2dC,
    C2dDisc,
    C2dS,
    C2dT,
    C2mQ,
    C2rC,
    C2rCfm,
    ClientList,
    D2cCfm,
    D2cCr,
    D2cDisc,
    D2cT,
    IpPort,
    M2cQr,
    PortList,
    R2cT,
    Timer,
    UdpXml,
    UdpXmlError,
)


def test_parse_disconnect():
    doc = b"<P2P><C2D_DISC><cid>82000</cid><did>80</did></C2D_DISC></P2P>"
    parsed = UdpXml.from_bytes(doc)
    assert parsed.c2d_disc == C2dDisc(cid=82000, did=80)
    assert parsed.d2c_t is None


def test_parse_camera_transmission_with_declaration_and_whitespace():
    doc = (
        b'<?xml version="1.0" encoding="UTF-8" ?>\n<P2P>\n<D2C_T>\n'
        b"<sid>62098713</sid>\n<conn>local</conn>\n<cid>82001</cid>\n"
        b"<did>96</did>\n</D2C_T>\n</P2P>\n"
    )
    parsed = UdpXml.from_bytes(doc)
    assert parsed.d2c_t == D2cT(sid=62098713, conn="local", cid=82001, did=96)


def test_p_tag_maps_to_os():
    doc = b"<P2P><C2M_Q><uid>placeholder</uid><p>MAC</p></C2M_Q></P2P>"
    parsed = UdpXml.from_bytes(doc)
    assert parsed.c2m_q == C2mQ(uid="placeholder", os="MAC")
    assert b"<p>MAC</p>" in parsed.to_bytes()


def test_missing_fields_take_defaults():
    parsed = UdpXml.from_bytes(b"<P2P><C2D_T><conn>local</conn></C2D_T></P2P>")
    assert parsed.c2d_t == C2dT(sid=0, conn="local", cid=0, mtu=0)


def test_unknown_elements_are_ignored():
    doc = b"<P2P><C2D_DISC><cid>1</cid><extra>x</extra><did>2</did></C2D_DISC><ZZZ/></P2P>"
    assert UdpXml.from_bytes(doc).c2d_disc == C2dDisc(cid=1, did=2)


def test_to_bytes_has_declaration_and_only_present_messages():
    out = UdpXml(c2d_disc=C2dDisc(cid=82000, did=80)).to_bytes()
    assert out.startswith(b'<?xml version="1.0" encoding="utf-8"?><P2P>')
    assert b"<C2D_DISC><cid>82000</cid><did>80</did></C2D_DISC>" in out
    assert b"D2C_T" not in out


def test_booleans_are_written_as_words_and_read_back():
    msg = UdpXml(c2d_c=C2dC(uid="placeholder", cli=ClientList(port=3000), debug=True))
    out = msg.to_bytes()
    assert b"<debug>true</debug>" in out
    assert UdpXml.from_bytes(out) == msg


def test_numeric_boolean_is_accepted():
    doc = b"<P2P><C2R_C><debug>0</debug><family>4</family></C2R_C></P2P>"
    parsed = UdpXml.from_bytes(doc)
    assert parsed.c2r_c.debug is False
    assert parsed.c2r_c.family == 4


def test_full_document_roundtrip():
    msg = UdpXml(
        c2d_s=C2dS(to=PortList(port=3000)),
        c2d_c=C2dC(uid="placeholder", cli=ClientList(port=5000), cid=-7, mtu=1350, os="WIN"),
        d2c_c_r=D2cCr(timer=Timer(def_=1, hb=2, hbt=3), rsp=0, cid=4, did=5),
        d2c_t=D2cT(sid=62098713, conn="local", cid=82001, did=96),
        c2d_t=C2dT(sid=62098713, conn="local", cid=82001, mtu=1350),
        d2c_cfm=D2cCfm(sid=62098713, conn="local", rsp=0, cid=82001, did=96, time_r=0),
        c2d_disc=C2dDisc(cid=82000, did=80),
        d2c_disc=D2cDisc(cid=80, did=82000),
        c2m_q=C2mQ(uid="placeholder", os="MAC"),
        m2c_q_r=M2cQr(
            reg=IpPort(ip="192.0.2.1", port=9999),
            relay=IpPort(ip="192.0.2.2", port=9999),
            log=IpPort(ip="192.0.2.3", port=9999),
            t=IpPort(ip="192.0.2.4", port=9999),
        ),
        c2r_c=C2rC(
            uid="placeholder",
            cli=IpPort(ip="192.0.2.5", port=1234),
            relay=IpPort(ip="192.0.2.2", port=9999),
            cid=-1,
            debug=False,
            family=4,
            os="MAC",
        ),
        r2c_t=R2cT(dev=IpPort(ip="192.0.2.6", port=4321), cid=9, sid=10),
        c2r_cfm=C2rCfm(sid=1, conn="relay", rsp=0, cid=2, did=3),
    )
    assert UdpXml.from_bytes(msg.to_bytes()) == msg


def test_timer_def_tag():
    out = UdpXml(d2c_c_r=D2cCr(timer=Timer(def_=3))).to_bytes()
    assert b"<def>3</def>" in out


def test_text_is_escaped_and_restored():
    msg = UdpXml(c2d_t=C2dT(conn="a<b&c"))
    assert UdpXml.from_bytes(msg.to_bytes()).c2d_t.conn == "a<b&c"


@given(
    st.integers(min_value=0, max_value=0xFFFFFFFF),
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz", max_size=12),
    st.integers(min_value=-(2**31), max_value=2**31 - 1),
    st.integers(min_value=-(2**31), max_value=2**31 - 1),
)
def test_d2c_t_roundtrip(sid, conn, cid, did):
    msg = UdpXml(d2c_t=D2cT(sid=sid, conn=conn, cid=cid, did=did))
    assert UdpXml.from_bytes(msg.to_bytes()) == msg


def test_bad_integer_raises():
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<P2P><C2D_DISC><cid>abc</cid></C2D_DISC></P2P>")


def test_out_of_range_integer_raises():
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<P2P><C2D_T><sid>-1</sid></C2D_T></P2P>")
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<P2P><R2C_T><dev><port>70000</port></dev></R2C_T></P2P>")


def test_out_of_range_integer_on_write_raises():
    with pytest.raises(UdpXmlError):
        UdpXml(c2r_c=C2rC(family=256)).to_bytes()


def test_bad_boolean_raises():
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<P2P><C2D_C><debug>maybe</debug></C2D_C></P2P>")


def test_wrong_root_raises():
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<body><C2D_DISC/></body>")


def test_malformed_xml_raises():
    with pytest.raises(UdpXmlError):
        UdpXml.from_bytes(b"<P2P><C2D_DISC>")


def test_error_is_a_value_error():
    with pytest.raises(ValueError):
        UdpXml.from_bytes(b"not xml")
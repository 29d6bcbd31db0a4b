import gmpy2


def recover_unpadded_message(server, s=2):
    """
    Unpadded RSA is malleable: c' = c * s^e decrypts to m * s, which the
    server does not recognise as its secret. Dividing by s gives m back.
    """
    n = server.n
    t = int(gmpy2.invert(s, n))
    altered_ciphertext = (server.ciphertext * server.encrypt(s)) % n
    altered_cleartext = server.decrypt(altered_ciphertext)
    return (altered_cleartext * t) % n
